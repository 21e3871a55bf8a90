from typing import Dict, Mapping, Optional

from monkey.types import Value


class Environment:
    """A scope frame mapping identifiers to values, with an optional outer frame.

    Lookups walk outward through the chain. Writes always land in this
    frame, so a binding made inside a function call shadows, and never
    changes, an outer binding of the same name.
    """
    def __init__(self, store: Optional[Mapping[str, Value]] = None, outer: Optional['Environment'] = None):
        self.outer = outer
        self.store: Dict[str, Value] = dict(store) if store else {}

    @classmethod
    def enclosed(cls, outer: 'Environment') -> 'Environment':
        return cls(outer=outer)

    def get(self, name: str) -> Optional[Value]:
        env: Optional[Environment] = self
        while env is not None:
            if name in env.store:
                return env.store[name]
            env = env.outer
        return None

    def set(self, name: str, value: Value) -> Value:
        self.store[name] = value
        return value

    def __contains__(self, name: str) -> bool:
        return self.get(name) is not None

    def __repr__(self) -> str:
        depth = 0
        env = self.outer
        while env is not None:
            depth += 1
            env = env.outer
        return f"<Environment names={sorted(self.store)} depth={depth}>"
