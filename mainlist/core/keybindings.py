"""Key combinations -> zero-argument commands."""
import logging
from typing import Awaitable, Callable, Dict, Mapping, Optional

from mainlist.config import KEY_BINDINGS
from mainlist.core.errors import UnknownBindingError
from mainlist.models.result import CommandResult

logger = logging.getLogger(__name__)

DEFAULT_BINDINGS: Dict[str, str] = {
    "ctrl+1": "add_current_to_main",
    "ctrl+`": "remove_current_from_context",
    "ctrl+2": "remove_selected",
    "ctrl+z": "undo",
    "ctrl+y": "redo",
    "ctrl+shift+z": "redo",
}

_MODIFIER_ORDER = ("ctrl", "alt", "shift")
_MODIFIER_ALIASES = {
    "control": "ctrl",
    "cmd": "ctrl",
    "command": "ctrl",
    "meta": "ctrl",
    "mod": "ctrl",
    "option": "alt",
}


def normalize_combo(combo: str) -> str:
    """Canonical form: lower-case, cmd/meta folded into ctrl, modifiers first in fixed order.

    "Shift+Cmd+Z" -> "ctrl+shift+z". The key itself may be "+" ("ctrl++").
    """
    raw = (combo or "").strip().lower()
    if not raw:
        raise ValueError("Empty key combination")
    if raw.endswith("++"):
        parts, key = raw[:-2].split("+"), "+"
    else:
        *parts, key = raw.split("+")
    modifiers = set()
    for part in parts:
        part = part.strip()
        if not part:
            continue
        name = _MODIFIER_ALIASES.get(part, part)
        if name not in _MODIFIER_ORDER:
            raise ValueError(f"Unknown modifier {part!r} in {combo!r}")
        modifiers.add(name)
    key = key.strip()
    if not key:
        raise ValueError(f"No key in {combo!r}")
    return "+".join([m for m in _MODIFIER_ORDER if m in modifiers] + [key])


def parse_binding_overrides(raw: str) -> Dict[str, str]:
    """Parse "ctrl+1=add_current_to_main,ctrl+z=undo" into a combo -> command map."""
    out: Dict[str, str] = {}
    for entry in (raw or "").split(","):
        entry = entry.strip()
        if not entry:
            continue
        combo, sep, command = entry.rpartition("=")
        if not sep or not combo.strip() or not command.strip():
            raise ValueError(f"Invalid key binding {entry!r}; expected combo=command")
        out[normalize_combo(combo)] = command.strip()
    return out


class KeyBindings:
    """Dispatches normalized key combinations to commands by name."""

    def __init__(
        self,
        commands: Mapping[str, Callable[[], Awaitable[CommandResult]]],
        bindings: Optional[Mapping[str, str]] = None,
    ) -> None:
        self._commands = dict(commands)
        self._bindings: Dict[str, str] = {}
        for combo, name in (bindings if bindings is not None else DEFAULT_BINDINGS).items():
            self.bind(combo, name)

    @classmethod
    def from_config(cls, commands, overrides: str = KEY_BINDINGS) -> "KeyBindings":
        bindings = dict(DEFAULT_BINDINGS)
        bindings.update(parse_binding_overrides(overrides))
        return cls(commands, bindings)

    def bind(self, combo: str, command_name: str) -> None:
        if command_name not in self._commands:
            raise ValueError(f"Unknown command {command_name!r}")
        self._bindings[normalize_combo(combo)] = command_name

    def bindings(self) -> Dict[str, str]:
        return dict(self._bindings)

    async def dispatch(self, combo: str) -> CommandResult:
        try:
            key = normalize_combo(combo)
        except ValueError as exc:
            raise UnknownBindingError(str(exc)) from exc
        name = self._bindings.get(key)
        if name is None:
            raise UnknownBindingError(f"No command bound to {key}")
        logger.debug("Key %s -> %s", key, name)
        return await self._commands[name]()
