import multiprocessing as mp

import numpy as np
import pandas as pd
from tqdm import tqdm

from ..breakup.events import CollisionEvent, ExplosionEvent
from ..breakup.NASA_SBM_frags import FRAGMENT_COLUMNS, generate_fragments, fragments_to_dataframe
from .satellite import Satellite


def process_event(args):
    """
    Worker for a single event, kept at module level so it can be sent to a process pool.
    """
    event, seed, rounding = args
    return generate_fragments(event, seed=seed, rounding=rounding)


class ScenarioProperties:
    def __init__(self, min_characteristic_length: float = 0.1, seed: int = None, rounding: str = "floor",
                 parallel_processing: bool = False, verbose: bool = False):
        """
        Holds the run settings, satellites and fragmentation events of a scenario.

        There is no validation here as this should have been completed within the Model class.

        Args:
            min_characteristic_length (float, optional): Smallest fragment size [m] used for events that
                do not set their own. Defaults to 0.1.
            seed (int, optional): Root seed. Every event gets its own stream spawned from it.
            rounding (str, optional): Fragment count rounding policy. Defaults to "floor".
            parallel_processing (bool, optional): Generate events in a process pool. Defaults to False.
            verbose (bool, optional): Print a summary after a run. Defaults to False.
        """
        self.min_characteristic_length = min_characteristic_length
        self.seed = seed
        self.rounding = rounding
        self.parallel_processing = parallel_processing
        self.verbose = verbose

        self.satellites = {}
        self.events = []
        self.fragments = None

    def add_scenario(self, satellites_json, events_json):
        """
        Add named satellites and the events that use them. Nothing is stored unless every
        satellite and every event is valid, so a failed call leaves the scenario unchanged.

        Args:
            satellites_json (dict): Mapping of name -> satellite definition
            events_json (list): Event definitions referring to satellites by name

        Returns:
            list: The newly built CollisionEvent and ExplosionEvent objects
        """
        satellites = self._build_satellites(satellites_json)
        events = self._build_events(events_json, satellites)

        self.satellites = satellites
        self.events = self.events + events
        return events

    def _build_satellites(self, satellites_json):
        satellites = dict(self.satellites)
        for name, properties in satellites_json.items():
            if name in satellites:
                raise ValueError(f"Satellite '{name}' is defined more than once.")
            satellites[name] = Satellite.from_dict(properties)
        return satellites

    @staticmethod
    def _lookup(satellites, name):
        try:
            return satellites[name]
        except KeyError:
            raise ValueError(f"Event references unknown satellite '{name}'.") from None

    def _build_events(self, events_json, satellites):
        events = []
        for event in events_json:
            event_type = str(event.get("type", "")).lower()
            names = event.get("satellites", [])
            if isinstance(names, str):
                names = [names]
            members = [self._lookup(satellites, name) for name in names]
            min_characteristic_length = event.get("min_characteristic_length", self.min_characteristic_length)

            if event_type == "collision":
                events.append(CollisionEvent(members, min_characteristic_length))
            elif event_type == "explosion":
                events.append(ExplosionEvent(members, min_characteristic_length))
            else:
                raise ValueError(f"Unknown event type '{event.get('type')}', expected 'collision' or 'explosion'.")
        return events

    def event_seeds(self):
        """
        One independent SeedSequence per event, so results do not depend on the execution order.
        """
        return np.random.SeedSequence(self.seed).spawn(len(self.events))

    def run_model(self):
        """
        Generate the fragments of every event.

        Returns:
            list of np.ndarray: One fragment table per event, in event order
        """
        args = [(event, seed, self.rounding) for event, seed in zip(self.events, self.event_seeds())]

        if self.parallel_processing and len(args) > 1:
            with mp.Pool(processes=min(mp.cpu_count(), len(args))) as pool:
                results = list(tqdm(pool.imap(process_event, args), total=len(args), desc="Generating fragments"))
        else:
            results = [process_event(arg) for arg in tqdm(args, desc="Generating fragments")]

        self.fragments = results

        if self.verbose:
            print(f"Generated {sum(len(f) for f in results)} fragments from {len(results)} events")

        return results

    def fragments_to_dataframe(self):
        """
        All fragment tables in a single DataFrame with the event index and event type.
        """
        if self.fragments is None:
            raise ValueError("No fragments available, run the model first.")

        frames = []
        for index, (event, fragments) in enumerate(zip(self.events, self.fragments)):
            df = fragments_to_dataframe(fragments)
            df.insert(0, "event_type", "collision" if isinstance(event, CollisionEvent) else "explosion")
            df.insert(0, "event", index)
            frames.append(df)

        if not frames:
            return pd.DataFrame(columns=["event", "event_type", *FRAGMENT_COLUMNS])
        return pd.concat(frames, ignore_index=True)
