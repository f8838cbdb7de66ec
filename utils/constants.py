from enum import auto, Enum, IntEnum

from config import BELT

# Answers remembered per card; older ones fall off the front
MAX_HISTORY = 5

# Durable store keys
STATS_KEY = 'flashcard_stats'
SESSION_KEY = 'flashcard_session'

# UI timings in seconds
AUTO_ADVANCE_DELAY = 0.15
FLIP_RESET_DELAY = 0.3
FLIP_DEBOUNCE = 0.4


class Category(str, Enum):
    ALL = 'all'
    RECITE = 'recite'
    PERFORM = 'perform'


CATEGORY_NAMES = {
    Category.ALL: 'All',
    Category.RECITE: 'Recite',
    Category.PERFORM: 'Perform',
}


class DrillState(IntEnum):
    STUDYING = auto()


def _belt(name, color, enabled=False):
    slug = name.lower()
    return {
        'name': name,
        'color': color,
        'path': f'study/{slug}',
        # dict order is the order files are concatenated for Category.ALL
        'files': {Category.RECITE: 'recite.csv', Category.PERFORM: 'perform.csv'},
        'enabled': enabled,
    }


BELTS = {
    'gokyu': _belt('Gokyu', 'Yellow', enabled=True),
    'yonkyu': _belt('Yonkyu', 'Orange'),
    'sankyu': _belt('Sankyu', 'Green'),
    'nikyu': _belt('Nikyu', 'Blue'),
    'ikkyu': _belt('Ikkyu', 'Brown'),
    'shodan': _belt('Shodan', 'Black'),
}

DEFAULT_BELT = 'gokyu'


def pick_belt(name):
    """Configured belt if it exists and has study files, else the default."""
    belt = BELTS.get(name)
    if belt is None or not belt['enabled']:
        return DEFAULT_BELT
    return name


CURRENT_BELT = pick_belt(BELT)

BELT_EMOJI = {
    'Yellow': '\U0001f7e8',
    'Orange': '\U0001f7e7',
    'Green': '\U0001f7e9',
    'Blue': '\U0001f7e6',
    'Brown': '\U0001f7eb',
    'Black': '\u2b1b',
}
