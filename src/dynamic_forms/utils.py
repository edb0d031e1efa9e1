from typing import Any, Iterable

def is_value(value: Any) -> bool:
    """Check if `value` holds something worth sending or binding."""
    return value is not None and not (isinstance(value, str) and value == '')


def get_by_path(data: dict, path: str | Iterable[str], default: Any = None) -> Any:
    """Walk a nested dict through a dotted `path`."""
    parts = path.split('.') if isinstance(path, str) else path
    current = data
    for part in parts:
        if not isinstance(current, dict) or part not in current:
            return default
        current = current[part]
    return current


def set_by_path(data: dict, path: str, value: Any) -> dict:
    """Set `value` into a nested dict creating the missing branches."""
    *branches, leaf = path.split('.')
    current = data
    for part in branches:
        current = current.setdefault(part, {})
    current[leaf] = value
    return data


def link_href(resource: Any) -> str | None:
    """Returns the identity of a HAL reference or resource."""
    if not isinstance(resource, dict):
        return None
    return resource.get('href') or get_by_path(resource, '_links.self.href') or None


def link_title(resource: Any) -> str | None:
    if not isinstance(resource, dict):
        return None
    return resource.get('name') or resource.get('title') or get_by_path(resource, '_links.self.title')


def _dict_merge(a: dict, b: dict):
    sa, sb = map(set, (a, b))
    for key in sa - sb:
        yield key, a[key]
    for key in sb - sa:
        yield key, b[key]
    for key in sa & sb:
        value = a[key]
        if isinstance(value, dict) and isinstance(b[key], dict):
            yield key, dict(_dict_merge(value, b[key]))
        else:
            yield key, value


def dict_merge(a: dict, b: dict) -> dict:
    """Deep merge two dicts, on conflicts `a` wins."""
    return dict(_dict_merge(a, b))
