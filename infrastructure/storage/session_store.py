"""
Session credential stores.

The API client never touches browser storage or ``st.session_state`` directly;
it talks to a ``SessionStore`` so tests can use a plain dict and deployments
can persist to SQLite.
"""

from typing import Dict, Mapping, Optional, Protocol

import streamlit as st


class SessionStore(Protocol):
    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...

    def set_many(self, values: Mapping[str, str]) -> None: ...

    def delete(self, key: str) -> None: ...

    def clear(self) -> None: ...


class InMemorySessionStore:
    def __init__(self, initial: Optional[Mapping[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def set_many(self, values: Mapping[str, str]) -> None:
        self._data.update(values)

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def clear(self) -> None:
        self._data.clear()


class StreamlitSessionStore:
    """Keeps credentials in a dict under one ``st.session_state`` key."""

    def __init__(self, namespace: str = "api_session"):
        self.namespace = namespace

    def _bucket(self) -> Dict[str, str]:
        if self.namespace not in st.session_state:
            st.session_state[self.namespace] = {}
        return st.session_state[self.namespace]

    def get(self, key: str) -> Optional[str]:
        return self._bucket().get(key)

    def set(self, key: str, value: str) -> None:
        self._bucket()[key] = value

    def set_many(self, values: Mapping[str, str]) -> None:
        self._bucket().update(values)

    def delete(self, key: str) -> None:
        self._bucket().pop(key, None)

    def clear(self) -> None:
        st.session_state[self.namespace] = {}
