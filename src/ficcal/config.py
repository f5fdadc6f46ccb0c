"""
ficcal.config
-------------
Build calendar and solar-system schemas from plain mappings or YAML files.

A world file holds a `calendar:` mapping, a `solar_system:` mapping, or both:

    calendar:
      name: reckoning
      months:
        - {name: Hammer, days: 30}
        - {name: Midwinter, days: 1, leap_days: 0}
      weekdays: [Firstday, Seconday, Thirday]
      eras:
        - {name: Dale Reckoning, abbreviation: DR, start: 0}
      leap_rule: {rules: [[4, true]], offset: 0}
    solar_system:
      name: default
      bodies:
        - {name: Sun, period: 1, kind: primary}
        - {name: Moon, period: 28, phase_offset: 1/4}

Strings, plain lists and mappings are all accepted for weekdays, and
fractions may be written as "29/2" or 14.5. Every problem in a mapping is
reported at once through SchemaError.
"""

from __future__ import annotations

import logging
from fractions import Fraction
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

import yaml

from .core.errors import SchemaError
from .engines.astro.solar_system import Body, BodyKind, SolarSystemSchema, as_fraction, solar_violations
from .engines.leap import LeapRule
from .engines.schema import CalendarSchema, Era, MonthDef, WeekdayDef, calendar_violations

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

CALENDAR_KEYS = frozenset({"name", "months", "weekdays", "eras", "leap_rule", "weekday_offset"})
MONTH_KEYS = frozenset({"name", "days", "abbreviation", "leap_days"})
WEEKDAY_KEYS = frozenset({"name", "abbreviation"})
ERA_KEYS = frozenset({"name", "start", "direction", "abbreviation"})
LEAP_KEYS = frozenset({"rules", "offset"})
SOLAR_KEYS = frozenset({"name", "bodies", "conjunction_tolerance"})
BODY_KEYS = frozenset({"name", "period", "phase_offset", "kind", "subdivisions"})
WORLD_KEYS = frozenset({"calendar", "solar_system"})


# ---------------------------------------------------------
# Field readers: append problems to `out`, never raise
# ---------------------------------------------------------

def _warn_unknown(where: str, raw: Mapping[str, Any], known: frozenset) -> None:
    extra = sorted(str(k) for k in raw if k not in known)
    if extra:
        logger.warning("%s: ignoring unknown key(s) %s", where, extra)


def _int(raw: Mapping[str, Any], key: str, where: str, out: List[str], default: Optional[int] = None) -> Optional[int]:
    if key not in raw or raw[key] is None:
        if default is None:
            out.append(f"{where}: missing '{key}'")
        return default
    value = raw[key]
    if isinstance(value, bool) or not isinstance(value, int):
        out.append(f"{where}: '{key}' must be an integer, got {value!r}")
        return default
    return value


def _str(raw: Mapping[str, Any], key: str, where: str, out: List[str], required: bool = True) -> Optional[str]:
    value = raw.get(key)
    if value is None:
        if required:
            out.append(f"{where}: missing '{key}'")
        return None
    if not isinstance(value, str):
        out.append(f"{where}: '{key}' must be a string, got {value!r}")
        return None
    return value


def _frac(raw: Mapping[str, Any], key: str, where: str, out: List[str], default: Optional[Fraction] = None) -> Optional[Fraction]:
    if key not in raw or raw[key] is None:
        if default is None:
            out.append(f"{where}: missing '{key}'")
        return default
    value = raw[key]
    try:
        if isinstance(value, bool):
            raise TypeError
        return as_fraction(value)
    except (TypeError, ValueError, ZeroDivisionError):
        out.append(f"{where}: '{key}' must be a number or fraction, got {value!r}")
        return default


def _items(raw: Mapping[str, Any], key: str, where: str, out: List[str], required: bool = True) -> List[Any]:
    value = raw.get(key)
    if value is None:
        if required:
            out.append(f"{where}: missing '{key}'")
        return []
    if not isinstance(value, list):
        out.append(f"{where}: '{key}' must be a list, got {type(value).__name__}")
        return []
    return value


def _mapping(item: Any, where: str, out: List[str]) -> Optional[Mapping[str, Any]]:
    if not isinstance(item, Mapping):
        out.append(f"{where}: expected a mapping, got {item!r}")
        return None
    return item


# ---------------------------------------------------------
# Calendar
# ---------------------------------------------------------

def _read_calendar(raw: Any) -> Tuple[Dict[str, Any], List[str]]:
    out: List[str] = []
    raw = _mapping(raw, "calendar", out)
    if raw is None:
        return {}, out
    _warn_unknown("calendar", raw, CALENDAR_KEYS)

    months = []
    for i, item in enumerate(_items(raw, "months", "calendar", out), start=1):
        where = f"month {i}"
        m = _mapping(item, where, out)
        if m is None:
            continue
        _warn_unknown(where, m, MONTH_KEYS)
        name = _str(m, "name", where, out)
        days = _int(m, "days", where, out)
        if name is None or days is None:
            continue
        months.append(MonthDef(
            name=name,
            days=days,
            abbreviation=_str(m, "abbreviation", where, out, required=False),
            leap_days=_int(m, "leap_days", where, out, default=0),
        ))

    weekdays = []
    for i, item in enumerate(_items(raw, "weekdays", "calendar", out), start=1):
        if isinstance(item, str):
            weekdays.append(WeekdayDef(item))
            continue
        where = f"weekday {i}"
        w = _mapping(item, where, out)
        if w is None:
            continue
        _warn_unknown(where, w, WEEKDAY_KEYS)
        name = _str(w, "name", where, out)
        if name is not None:
            weekdays.append(WeekdayDef(name, _str(w, "abbreviation", where, out, required=False)))

    eras = []
    for i, item in enumerate(_items(raw, "eras", "calendar", out, required=False)):
        where = f"era {i}"
        e = _mapping(item, where, out)
        if e is None:
            continue
        _warn_unknown(where, e, ERA_KEYS)
        name = _str(e, "name", where, out)
        start = e.get("start")
        if start is not None and (isinstance(start, bool) or not isinstance(start, int)):
            out.append(f"{where}: 'start' must be an integer or null, got {start!r}")
            start = None
        if name is not None:
            eras.append(Era(
                name=name,
                start=start,
                direction=_int(e, "direction", where, out, default=1),
                abbreviation=_str(e, "abbreviation", where, out, required=False),
            ))

    leap_rule = LeapRule()
    leap_raw = raw.get("leap_rule")
    if leap_raw is not None:
        lr = _mapping(leap_raw, "leap_rule", out)
        if lr is not None:
            _warn_unknown("leap_rule", lr, LEAP_KEYS)
            rules = []
            for i, rule in enumerate(_items(lr, "rules", "leap_rule", out)):
                if (
                    isinstance(rule, (list, tuple)) and len(rule) == 2
                    and isinstance(rule[0], int) and isinstance(rule[1], bool)
                ):
                    rules.append((rule[0], rule[1]))
                else:
                    out.append(f"leap rule {i}: expected [divisor, is_leap], got {rule!r}")
            leap_rule = LeapRule(tuple(rules), _int(lr, "offset", "leap_rule", out, default=0))

    fields = dict(
        name=_str(raw, "name", "calendar", out) or "",
        months=tuple(months),
        weekdays=tuple(weekdays),
        eras=tuple(eras),
        leap_rule=leap_rule,
        weekday_offset=_int(raw, "weekday_offset", "calendar", out, default=0),
    )
    return fields, out


def _calendar_problems(fields: Dict[str, Any], out: List[str]) -> List[str]:
    if not fields:
        return out
    return out + calendar_violations(
        fields["name"], fields["months"], fields["weekdays"], fields["eras"], fields["leap_rule"]
    )


def check_calendar(raw: Any) -> List[str]:
    """Every problem with a calendar mapping (empty list: it is valid)."""
    return _calendar_problems(*_read_calendar(raw))


def calendar_from_dict(raw: Any) -> CalendarSchema:
    fields, out = _read_calendar(raw)
    problems = _calendar_problems(fields, out)
    if problems:
        raise SchemaError(problems)
    return CalendarSchema(**fields)


# ---------------------------------------------------------
# Solar system
# ---------------------------------------------------------

def _read_solar(raw: Any) -> Tuple[Dict[str, Any], List[str]]:
    out: List[str] = []
    raw = _mapping(raw, "solar_system", out)
    if raw is None:
        return {}, out
    _warn_unknown("solar_system", raw, SOLAR_KEYS)

    bodies = []
    for i, item in enumerate(_items(raw, "bodies", "solar_system", out)):
        where = f"body {i}"
        b = _mapping(item, where, out)
        if b is None:
            continue
        _warn_unknown(where, b, BODY_KEYS)
        name = _str(b, "name", where, out)
        period = _frac(b, "period", where, out)
        kind = b.get("kind", BodyKind.SATELLITE.value)
        if kind not in {k.value for k in BodyKind}:
            out.append(f"{where}: 'kind' must be one of {[k.value for k in BodyKind]}, got {kind!r}")
            continue
        if name is None or period is None:
            continue
        bodies.append(Body(
            name=name,
            period=period,
            phase_offset=_frac(b, "phase_offset", where, out, default=Fraction(0)),
            kind=BodyKind(kind),
            subdivisions=_int(b, "subdivisions", where, out, default=4),
        ))

    if not bodies and not out:
        out.append("solar_system: at least one body is required")
    fields = dict(
        name=_str(raw, "name", "solar_system", out) or "",
        bodies=tuple(bodies),
        conjunction_tolerance=_frac(raw, "conjunction_tolerance", "solar_system", out, default=Fraction(1, 32)),
    )
    return fields, out


def _solar_problems(fields: Dict[str, Any], out: List[str]) -> List[str]:
    if not fields:
        return out
    return out + solar_violations(fields["bodies"], fields["conjunction_tolerance"])


def check_solar_system(raw: Any) -> List[str]:
    """Every problem with a solar-system mapping (empty list: it is valid)."""
    return _solar_problems(*_read_solar(raw))


def solar_from_dict(raw: Any) -> SolarSystemSchema:
    fields, out = _read_solar(raw)
    problems = _solar_problems(fields, out)
    if problems:
        raise SchemaError(problems)
    return SolarSystemSchema(**fields)


# ---------------------------------------------------------
# YAML files
# ---------------------------------------------------------

def _load_yaml(path: PathLike) -> Any:
    path = Path(path)
    logger.debug("loading %s", path)
    try:
        with path.open("r", encoding="utf-8") as f:
            return yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise SchemaError([f"{path}: invalid YAML: {e}"]) from e


def _section(doc: Any, key: str, path: PathLike) -> Any:
    # A file may hold the section alone or wrapped under its key.
    if isinstance(doc, Mapping) and key in doc:
        return doc[key]
    if isinstance(doc, Mapping) and WORLD_KEYS & set(doc):
        raise SchemaError([f"{path}: no '{key}' section"])
    return doc


def load_calendar(path: PathLike) -> CalendarSchema:
    return calendar_from_dict(_section(_load_yaml(path), "calendar", path))


def load_solar_system(path: PathLike) -> SolarSystemSchema:
    return solar_from_dict(_section(_load_yaml(path), "solar_system", path))


def load_world(path: PathLike) -> Tuple[Optional[CalendarSchema], Optional[SolarSystemSchema]]:
    """Read a world file holding a calendar, a solar system, or both."""
    doc = _load_yaml(path)
    if not isinstance(doc, Mapping) or not WORLD_KEYS & set(doc):
        raise SchemaError([f"{path}: expected a 'calendar' and/or 'solar_system' section"])
    _warn_unknown(str(path), doc, WORLD_KEYS)

    # Collect problems from both sections before raising.
    problems: List[str] = []
    calendar = solar = None
    if "calendar" in doc:
        try:
            calendar = calendar_from_dict(doc["calendar"])
        except SchemaError as e:
            problems += e.violations
    if "solar_system" in doc:
        try:
            solar = solar_from_dict(doc["solar_system"])
        except SchemaError as e:
            problems += e.violations
    if problems:
        raise SchemaError(problems)
    return calendar, solar
