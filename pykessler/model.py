import json
import os

from .utils.simulation.scen_properties import ScenarioProperties
from .utils.breakup.NASA_SBM_frags import ROUNDING_POLICIES
from .utils.handlers.errors import BreakupModelError


class Model:
    """
    A class to represent a fragmentation scenario for pykessler.

    Attributes:
        min_characteristic_length (float): Default smallest fragment size of interest [m].
        seed (int, optional): Root seed for the Monte-Carlo sampling.
        rounding (str, optional): Fragment count rounding policy, "floor" or "stochastic".
        parallel_processing (bool, optional): Use a process pool for independent events.
        verbose (bool, optional): Print a summary after a run.
    """
    def __init__(self, min_characteristic_length=0.1, seed=None, rounding="floor",
                 parallel_processing=False, verbose=False):
        """
        Initialize the scenario properties for the fragmentation model.

        Raises:
            ValueError: If any parameters are of incorrect type or invalid value.
        """
        try:
            if isinstance(min_characteristic_length, bool) or not isinstance(min_characteristic_length, (int, float)):
                raise ValueError("min_characteristic_length must be a numeric type.")
            if min_characteristic_length <= 0:
                raise ValueError("min_characteristic_length must be positive.")
            if seed is not None and (isinstance(seed, bool) or not isinstance(seed, int) or seed < 0):
                raise ValueError("seed must be a non-negative integer or None.")
            if rounding not in ROUNDING_POLICIES:
                raise ValueError(f"rounding must be one of {ROUNDING_POLICIES}.")

            self.scenario_properties = ScenarioProperties(
                min_characteristic_length=min_characteristic_length,
                seed=seed,
                rounding=rounding,
                parallel_processing=bool(parallel_processing),
                verbose=bool(verbose)
            )

        except Exception as e:
            raise ValueError(f"An error occurred initializing the model: {str(e)}")

    @classmethod
    def from_json(cls, path):
        """
        Create and configure a model from a JSON scenario file holding "scenario_properties",
        "satellites" and "events".
        """
        with open(path) as f:
            try:
                simulation_data = json.load(f)
            except json.JSONDecodeError as e:
                raise ValueError(f"Invalid JSON in scenario file {path}: {e}")

        scenario_props = simulation_data.get("scenario_properties", {})
        model = cls(
            min_characteristic_length=scenario_props.get("min_characteristic_length", 0.1),
            seed=scenario_props.get("seed", None),
            rounding=scenario_props.get("rounding", "floor"),
            parallel_processing=scenario_props.get("parallel_processing", False),
            verbose=scenario_props.get("verbose", False)
        )
        model.simulation_name = simulation_data.get("simulation_name", os.path.splitext(os.path.basename(path))[0])
        model.configure_events(simulation_data)

        return model

    def configure_events(self, scenario_json):
        """
        Configure satellites and fragmentation events from a scenario dictionary.

        Args:
            scenario_json (dict): {"satellites": {name: {...}}, "events": [{"type": ..., "satellites": [...]}]}

        Returns:
            list: The configured CollisionEvent and ExplosionEvent objects.

        Raises:
            ValueError: If the scenario is invalid. Breakup model errors are raised unchanged.
        """
        try:
            self.scenario_properties.add_scenario(scenario_json.get("satellites", {}), scenario_json.get("events", []))
            return self.scenario_properties.events
        except BreakupModelError:
            raise
        except Exception as e:
            raise ValueError(f"An error occurred configuring events: {str(e)}")

    def run_model(self):
        """
        Generate the fragment population of every configured event.

        Returns:
            list of np.ndarray: One (n, 9) fragment table per event.
        """
        if not self.scenario_properties.events:
            raise ValueError("No events configured, call configure_events first.")
        return self.scenario_properties.run_model()

    def results_to_dataframe(self):
        """
        Convert the generated fragments to a single pandas DataFrame.
        """
        return self.scenario_properties.fragments_to_dataframe()


if __name__ == "__main__":

    model = Model.from_json(os.path.join(os.path.dirname(__file__), 'simulation_configurations', 'iridium-cosmos.json'))
    model.run_model()
    print(model.results_to_dataframe().groupby("event")["mass"].agg(["count", "sum"]))
