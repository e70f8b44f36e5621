from .utils.simulation.satellite import Satellite, SatKind, characteristic_length_from_mass
from .utils.breakup.events import FragmentationEvent, CollisionEvent, ExplosionEvent
from .utils.breakup.NASA_SBM_frags import FRAGMENT_COLUMNS, generate_fragments, fragments_to_dataframe
from .utils.handlers.errors import (BreakupModelError, InvalidConstruction, InvalidKindCode,
                                    InvalidBounds, NegativeOrNonFiniteCount)
from .model import Model
