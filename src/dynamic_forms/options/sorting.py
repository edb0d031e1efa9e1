from typing import Iterable, List

from ..utils import link_title


class HalSorting:
    """Default ordering of allowed values.

    Values carrying a `position` (priorities, statuses, types) keep the order
    defined on the server, any other list is sorted by name.
    """

    def sort(self, values: Iterable[dict]) -> List[dict]:
        values = list(values)
        if values and all(isinstance(v, dict) and v.get('position') is not None for v in values):
            return sorted(values, key=lambda v: v['position'])
        return sorted(values, key=lambda v: (link_title(v) or '').lower())
