from typing import Dict


def init_metrics() -> Dict[str, int | float | bool]:
    return {
        'rooms_attempted': 0,
        'rooms_placed': 0,
        'generation_exhausted': False,
        'corridors_carved': 0,
        'extra_connections': 0,
        'cells_carved': 0,
        'doors_created': 0,
        'regions_found': 0,
        'regions_retained': 0,
        'no_connectable_regions': False,
        'unreachable_rooms': 0,
        'runtime_ms': 0.0,
    }
