"""Label selectors for listing and watching shadow objects."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable, Mapping

from . import known

_EQUALITY_OPERATORS = frozenset({"=", "==", "!="})
_SET_OPERATORS = frozenset({"in", "notin"})
_EXISTENCE_OPERATORS = frozenset({"exists", "!"})
_NUMERIC_OPERATORS = frozenset({"gt", "lt"})
_OPERATORS = _EQUALITY_OPERATORS | _SET_OPERATORS | _EXISTENCE_OPERATORS | _NUMERIC_OPERATORS

_QUALIFIED_NAME_RE = re.compile(r"([A-Za-z0-9][-A-Za-z0-9_.]*)?[A-Za-z0-9]")
_DNS1123_LABEL_FMT = "[a-z0-9]([-a-z0-9]*[a-z0-9])?"
_DNS1123_LABEL_RE = re.compile(_DNS1123_LABEL_FMT)
_DNS1123_SUBDOMAIN_RE = re.compile(_DNS1123_LABEL_FMT + r"(\." + _DNS1123_LABEL_FMT + ")*")
_DNS1123_LABEL_ERR = (
    "a lowercase RFC 1123 label must consist of lower case alphanumeric characters or '-', "
    "and must start and end with an alphanumeric character"
)
_DNS1123_LABEL_MAX = 63
_DNS1123_SUBDOMAIN_MAX = 253
_QUALIFIED_NAME_MAX = 63
_LABEL_VALUE_MAX = 63

_FIELD_TO_LABEL = {"metadata.name": known.CONFIG_NAME_LABEL}


def _max_len_error(length: int) -> str:
    return f"must be no more than {length} characters"


def _regex_error(msg: str, fmt: str, *examples: str) -> str:
    if not examples:
        return f"{msg} (regex used for validation is '{fmt}')"
    shown = " or ".join(f"'{example}', " for example in examples)
    return f"{msg} (e.g. {shown}regex used for validation is '{fmt}')"


def validate_namespace_name(name: str) -> list[str]:
    """Return the reasons ``name`` is not a valid namespace name; empty if it is."""
    errors = []
    if len(name) > _DNS1123_LABEL_MAX:
        errors.append(_max_len_error(_DNS1123_LABEL_MAX))
    if not _DNS1123_LABEL_RE.fullmatch(name):
        errors.append(_regex_error(_DNS1123_LABEL_ERR, _DNS1123_LABEL_FMT, "my-name", "123-abc"))
    return errors


def _key_errors(key: str) -> list[str]:
    parts = key.split("/")
    if len(parts) == 1:
        prefix, name = "", parts[0]
    elif len(parts) == 2:
        prefix, name = parts
        if not prefix:
            return ["prefix part must be non-empty"]
        if len(prefix) > _DNS1123_SUBDOMAIN_MAX:
            return [f"prefix part {_max_len_error(_DNS1123_SUBDOMAIN_MAX)}"]
        if not _DNS1123_SUBDOMAIN_RE.fullmatch(prefix):
            return ["prefix part must be a lowercase RFC 1123 subdomain"]
    else:
        return ["a qualified name must consist of an optional prefix and a name, separated by '/'"]
    if not name:
        return ["name part must be non-empty"]
    errors = []
    if len(name) > _QUALIFIED_NAME_MAX:
        errors.append(f"name part {_max_len_error(_QUALIFIED_NAME_MAX)}")
    if not _QUALIFIED_NAME_RE.fullmatch(name):
        errors.append(
            "name part must consist of alphanumeric characters, '-', '_' or '.', "
            "and must start and end with an alphanumeric character"
        )
    return errors


def _value_errors(value: str) -> list[str]:
    errors = []
    if len(value) > _LABEL_VALUE_MAX:
        errors.append(_max_len_error(_LABEL_VALUE_MAX))
    if value and not _QUALIFIED_NAME_RE.fullmatch(value):
        errors.append(
            "a valid label must be an empty string or consist of alphanumeric characters, "
            "'-', '_' or '.', and must start and end with an alphanumeric character"
        )
    return errors


@dataclass(frozen=True)
class Requirement:
    """One condition on a label: key, operator and values.

    Operators are "=", "==", "!=", "in", "notin", "exists", "!" (does not
    exist), "gt" and "lt". Raises ValueError for an invalid combination.
    """

    key: str
    operator: str
    values: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "values", tuple(self.values))
        errors = _key_errors(self.key)
        if errors:
            raise ValueError(f"invalid label key {self.key!r}: {'; '.join(errors)}")
        op, count = self.operator, len(self.values)
        if op not in _OPERATORS:
            raise ValueError(f"operator {op!r} is not recognized")
        if op in _EQUALITY_OPERATORS and count != 1:
            raise ValueError("exact-match compatibility requires one single value")
        if op in _SET_OPERATORS and count == 0:
            raise ValueError("for 'in', 'notin' operators, values set can't be empty")
        if op in _EXISTENCE_OPERATORS and count != 0:
            raise ValueError("values set must be empty for exists and does not exist")
        if op in _NUMERIC_OPERATORS:
            if count != 1:
                raise ValueError("for 'Gt', 'Lt' operators, exactly one value is required")
            try:
                int(self.values[0])
            except ValueError:
                raise ValueError(
                    "for 'Gt', 'Lt' operators, the value must be an integer"
                ) from None
        for value in self.values:
            errors = _value_errors(value)
            if errors:
                raise ValueError(f"invalid label value {value!r}: {'; '.join(errors)}")

    def __str__(self) -> str:
        op = self.operator
        if op == "exists":
            return self.key
        if op == "!":
            return f"!{self.key}"
        if op in _SET_OPERATORS:
            return f"{self.key} {op} ({','.join(sorted(self.values))})"
        if op == "gt":
            return f"{self.key}>{self.values[0]}"
        if op == "lt":
            return f"{self.key}<{self.values[0]}"
        return f"{self.key}{op}{self.values[0]}"


def _requirement_matches(requirement: Requirement, labels: Mapping[str, str]) -> bool:
    op = requirement.operator
    present = requirement.key in labels
    if op in ("=", "==", "in"):
        return present and labels[requirement.key] in requirement.values
    if op in ("!=", "notin"):
        return not present or labels[requirement.key] not in requirement.values
    if op == "exists":
        return present
    if op == "!":
        return not present
    if not present:
        return False
    try:
        have = int(labels[requirement.key])
    except ValueError:
        return False
    want = int(requirement.values[0])
    return have > want if op == "gt" else have < want


@dataclass(frozen=True)
class Selector:
    """A conjunction of label requirements; with none it selects everything."""

    requirements: tuple[Requirement, ...] = ()

    def add(self, requirement: Requirement) -> Selector:
        """Return a new selector that also holds ``requirement``, kept ordered by key."""
        combined = sorted(self.requirements + (requirement,), key=lambda r: r.key)
        return Selector(tuple(combined))

    def matches(self, labels: Mapping[str, str]) -> bool:
        """Tell whether ``labels`` meet every requirement."""
        return all(_requirement_matches(r, labels) for r in self.requirements)

    def __str__(self) -> str:
        return ",".join(str(r) for r in self.requirements)


def _split_unescaped(text: str, separator: str) -> list[str]:
    parts, current, escaped = [], [], False
    for char in text:
        if escaped:
            current.append("\\" + char)
            escaped = False
        elif char == "\\":
            escaped = True
        elif char == separator:
            parts.append("".join(current))
            current = []
        else:
            current.append(char)
    if escaped:
        raise ValueError(f"invalid field selector {text!r}: trailing escape")
    parts.append("".join(current))
    return parts


def _unescape(text: str) -> str:
    return re.sub(r"\\(.)", r"\1", text)


def _parse_field_selector(text: str) -> Iterable[tuple[str, str, str]]:
    if not text.strip():
        return []
    terms = []
    for term in _split_unescaped(text, ","):
        index, escaped = 0, False
        while index < len(term):
            char = term[index]
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif term.startswith(("!=", "=="), index):
                op = term[index : index + 2]
                break
            elif char == "=":
                op = "="
                break
            index += 1
        else:
            raise ValueError(f"invalid selector: {term!r}; can't understand {term!r}")
        terms.append((_unescape(term[:index]), op, _unescape(term[index + len(op) :])))
    return terms


def list_selector(
    kind: str,
    namespace: str = "",
    label_selector: Selector | None = None,
    field_selector: str | None = None,
) -> Selector:
    """Build the Manifest selector for listing or watching objects of ``kind``.

    Only the "metadata.name" field can be selected; any other field raises
    ValueError. The kind, and the namespace when given, are always required.
    """
    selector = label_selector if label_selector is not None else Selector()
    for field_name, op, value in _parse_field_selector(field_selector or ""):
        label_key = _FIELD_TO_LABEL.get(field_name)
        if label_key is None:
            raise ValueError(
                f"Internal error occurred: unable to recognize selector key {field_name}"
            )
        selector = selector.add(Requirement(label_key, op, (value,)))

    selector = selector.add(Requirement(known.CONFIG_KIND_LABEL, "=", (kind,)))
    if namespace:
        selector = selector.add(Requirement(known.CONFIG_NAMESPACE_LABEL, "=", (namespace,)))
    return selector