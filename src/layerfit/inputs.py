"""Collecting and validating the resize target.

Raw values come from prompts, command-line options or settings and may be
strings, ints, bools or missing. Everything is checked here, before any scale
is computed.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Final, Union

from layerfit.errors import (
    InvalidConstrainError,
    InvalidDimensionError,
    MissingDimensionError,
    PromptAbortedError,
)
from layerfit.host.protocols import Prompter

logger: Final = logging.getLogger(__name__)

RawDimension = Union[int, str, None]
RawFlag = Union[bool, str]

WIDTH_PROMPT: Final = (
    "Enter target WIDTH in pixels [number]\n"
    "(enter none to scale by HEIGHT with constrained proportions)"
)
HEIGHT_PROMPT: Final = (
    "Enter target HEIGHT in pixels [number]\n"
    "(enter none to scale by WIDTH with constrained proportions)"
)
CONSTRAIN_PROMPT: Final = (
    "CONSTRAIN PROPORTIONS [true/false]\n(false resizes width and height independently)"
)

_DIMENSION_PATTERN: Final = re.compile(r"^(\d+)\s*(?:px)?$", re.IGNORECASE)


@dataclass(frozen=True)
class ResizeRequest:
    """A validated bounding box: at least one side, in whole pixels."""

    width: int | None
    height: int | None
    constrain: bool

    @property
    def is_partial(self) -> bool:
        """True when only one side of the box was given."""
        return self.width is None or self.height is None


@dataclass(frozen=True)
class ResizeDefaults:
    """Unvalidated starting values for a request."""

    width: RawDimension = 80
    height: RawDimension = 80
    constrain: RawFlag = True
    prompt_user: bool = False


def parse_dimension(raw: RawDimension, axis: str) -> int | None:
    """Turn a raw width/height into pixels.

    Empty input or ``"none"`` means "not given". Accepts an int or a string
    of digits with an optional ``px`` suffix.

    Raises:
        InvalidDimensionError: For anything else, or a value below one pixel
    """
    if raw is None:
        return None
    if isinstance(raw, bool):
        raise InvalidDimensionError(axis, raw)
    if isinstance(raw, int):
        value = raw
    else:
        text = str(raw).strip()
        if not text or text.lower() == "none":
            return None
        match = _DIMENSION_PATTERN.match(text)
        if match is None:
            raise InvalidDimensionError(axis, raw)
        value = int(match.group(1))

    if value <= 0:
        raise InvalidDimensionError(axis, raw)
    return value


def parse_constrain(raw: RawFlag) -> bool:
    """Turn ``True``/``False`` or ``"true"``/``"false"`` (any case) into a bool.

    Raises:
        InvalidConstrainError: For any other value
    """
    if isinstance(raw, bool):
        return raw
    if isinstance(raw, str):
        text = raw.strip().lower()
        if text == "true":
            return True
        if text == "false":
            return False
    raise InvalidConstrainError(raw)


def _default_text(value: RawDimension | RawFlag) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return str(value).lower()
    return str(value)


def _ask(prompter: Prompter, field: str, message: str, default: RawDimension | RawFlag) -> str:
    answer = prompter.prompt(message, _default_text(default))
    if answer is None:
        raise PromptAbortedError(field)
    return answer


def collect_request(defaults: ResizeDefaults, prompter: Prompter | None = None) -> ResizeRequest:
    """Build a validated ResizeRequest.

    With ``defaults.prompt_user`` the user is asked for width, height and,
    when both were given, the constrain flag; the defaults pre-fill each
    prompt. Giving only one side turns constrained proportions on without
    asking. Otherwise the defaults are used as they are.

    Args:
        defaults: Starting values and whether to prompt
        prompter: Where to ask; required when prompting

    Returns:
        The validated request

    Raises:
        InvalidDimensionError: Width or height is not a positive number
        MissingDimensionError: Neither width nor height was given
        InvalidConstrainError: Constrain flag is not true/false
        PromptAbortedError: The user cancelled a prompt
    """
    if defaults.prompt_user:
        if prompter is None:
            raise ValueError("Prompting for resize values needs a prompter")
        return _prompt_request(defaults, prompter)

    width = parse_dimension(defaults.width, "width")
    height = parse_dimension(defaults.height, "height")
    if width is None and height is None:
        raise MissingDimensionError()
    constrain = parse_constrain(defaults.constrain)

    request = ResizeRequest(width, height, constrain)
    if request.is_partial and not constrain:
        logger.warning(
            "Unconstrained resize with only the %s given: the other axis stays at 100%%",
            "width" if width is not None else "height",
        )
    return request


def _prompt_request(defaults: ResizeDefaults, prompter: Prompter) -> ResizeRequest:
    width = parse_dimension(_ask(prompter, "width", WIDTH_PROMPT, defaults.width), "width")
    height = parse_dimension(_ask(prompter, "height", HEIGHT_PROMPT, defaults.height), "height")

    if width is None and height is None:
        raise MissingDimensionError()
    if width is None or height is None:
        logger.info("Only one dimension given, constraining proportions")
        return ResizeRequest(width, height, True)

    raw_constrain = _ask(prompter, "constrain proportions", CONSTRAIN_PROMPT, defaults.constrain)
    return ResizeRequest(width, height, parse_constrain(raw_constrain))
