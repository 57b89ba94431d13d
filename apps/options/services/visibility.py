"""
Conditional display of options.

An option with ``depend_on_option_id`` is shown only while the radio option it
points at has ``show_when_value`` selected. Bad references fail open: the
option stays visible rather than hiding a control because of a data error.
"""

import logging
from dataclasses import dataclass
from typing import Dict, FrozenSet, Iterable, List, Mapping, Optional

from .definitions import OptionDefinition

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Dependency:
    """A resolved dependency of one option on a radio option."""
    option_id: str
    depends_on: str
    expected_value: str
    visible: bool = True


def resolve_dependency(
    option: OptionDefinition,
    options: Iterable[OptionDefinition]
) -> Optional[Dependency]:
    """
    Resolve the radio option that governs ``option``.

    Returns:
        The dependency, or None when the option is unconditioned: no
        dependency set, a self-dependency, or a target that is missing or
        not a radio option.
    """
    depends_on = option.depend_on_option_id
    if not depends_on:
        return None

    if depends_on == option.id:
        logger.warning("Option %s cannot depend on itself; showing it unconditionally", option.id)
        return None

    target = next((opt for opt in options if opt.id == depends_on), None)
    if target is None or not target.is_radio:
        logger.info(
            "Option %s depends on %s which is not a radio option of this set; showing it",
            option.id, depends_on
        )
        return None

    return Dependency(
        option_id=option.id,
        depends_on=depends_on,
        expected_value=option.show_when_value or '',
    )


def default_selection(radio: OptionDefinition) -> Optional[str]:
    """The value a radio group starts with: its first declared value."""
    if radio.values:
        return radio.values[0].label
    return None


class VisibilityResolver:
    """
    Tracks the selected value of every radio option and answers which
    options are visible.

    Selecting a radio value re-evaluates only the options that depend on that
    radio, following radio chains; other options keep their state. A radio
    that is itself hidden hides everything it governs.
    """

    def __init__(
        self,
        options: Iterable[OptionDefinition],
        selections: Optional[Mapping[str, str]] = None
    ):
        self.options: List[OptionDefinition] = list(options)
        self._by_id: Dict[str, OptionDefinition] = {opt.id: opt for opt in self.options}
        self._dependencies: Dict[str, Dependency] = {}
        for option in self.options:
            dependency = resolve_dependency(option, self.options)
            if dependency is not None:
                self._dependencies[option.id] = dependency

        self._selections: Dict[str, Optional[str]] = {}
        for option in self.options:
            if option.is_radio:
                self._selections[option.id] = default_selection(option)
        for radio_id, label in (selections or {}).items():
            if radio_id in self._selections:
                self._selections[radio_id] = label

        self._visible: Dict[str, bool] = {}
        self.evaluate()

    def _compute(self, option_id: str, chain: FrozenSet[str] = frozenset()) -> bool:
        dependency = self._dependencies.get(option_id)
        if dependency is None:
            return True
        # a hidden radio governs nothing; a looping chain stays hidden
        if option_id in chain or not self._compute(dependency.depends_on, chain | {option_id}):
            return False
        return self._selections.get(dependency.depends_on) == dependency.expected_value

    def evaluate(self) -> Dict[str, bool]:
        """Evaluate every option once and return the full visibility map."""
        self._visible = {option.id: self._compute(option.id) for option in self.options}
        return dict(self._visible)

    def dependency_for(self, option_id: str) -> Optional[Dependency]:
        dependency = self._dependencies.get(option_id)
        if dependency is None:
            return None
        return Dependency(
            option_id=dependency.option_id,
            depends_on=dependency.depends_on,
            expected_value=dependency.expected_value,
            visible=self._visible.get(option_id, True),
        )

    def dependents_of(self, radio_id: str) -> List[str]:
        return [
            option_id for option_id, dependency in self._dependencies.items()
            if dependency.depends_on == radio_id
        ]

    def selected(self, radio_id: str) -> Optional[str]:
        return self._selections.get(radio_id)

    @property
    def selections(self) -> Dict[str, Optional[str]]:
        return dict(self._selections)

    def select(self, radio_id: str, label: Optional[str]) -> Dict[str, bool]:
        """
        Record a new value for a radio group.

        Returns:
            Visibility of the options depending on that radio, directly or
            through another radio
        """
        if radio_id not in self._selections:
            logger.debug("Ignoring selection for unknown radio option %s", radio_id)
            return {}

        self._selections[radio_id] = label
        changed = {}
        pending = self.dependents_of(radio_id)
        while pending:
            option_id = pending.pop(0)
            if option_id in changed:
                continue
            self._visible[option_id] = self._compute(option_id)
            changed[option_id] = self._visible[option_id]
            # radios further down the chain follow their parent
            pending.extend(self.dependents_of(option_id))
        return changed

    def is_visible(self, option_id: str) -> bool:
        # Options this resolver does not know about are never hidden
        return self._visible.get(option_id, True)

    def is_required(self, option: OptionDefinition) -> bool:
        """Hidden options never block form submission."""
        return option.required and self.is_visible(option.id)

    def visible_options(self) -> List[OptionDefinition]:
        return [option for option in self.options if self.is_visible(option.id)]
