"""Data models for positioned OCR tokens."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

REQUIRED_FIELDS: tuple[str, ...] = ("text", "x", "y", "width", "height", "confidence")


@dataclass(frozen=True)
class PositionedToken:
    """A recognized character or word with its bounding box.

    Parameters
    ----------
    text : str
        The recognized text.
    x : float
        Left edge of the bounding box.
    y : float
        Top edge of the bounding box.
    width : float
        Box width.
    height : float
        Box height.
    confidence : float
        Recognition confidence (0-100).
    block : int
        Spatial block (e.g. page column) the token belongs to.

    Examples
    --------
    >>> token = PositionedToken(text="G", x=10, y=5, width=8, height=12, confidence=91)
    >>> token.center_y
    11.0
    """

    text: str
    x: float
    y: float
    width: float
    height: float
    confidence: float
    block: int = 0

    @property
    def center_y(self) -> float:
        """Vertical centre of the box."""
        return self.y + self.height / 2

    @property
    def right(self) -> float:
        """Right edge of the box."""
        return self.x + self.width

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> PositionedToken:
        """Build a token from a mapping.

        Parameters
        ----------
        data : Mapping[str, Any]
            Mapping with ``text``, ``x``, ``y``, ``width``, ``height`` and
            ``confidence`` keys, plus an optional ``block``.

        Returns
        -------
        PositionedToken
            The token.

        Raises
        ------
        ValueError
            If a required field is missing or not numeric.
        """
        missing = [key for key in REQUIRED_FIELDS if key not in data]
        if missing:
            msg = f"Positioned token is missing fields: {', '.join(missing)}"
            raise ValueError(msg)

        try:
            return cls(
                text=str(data["text"]),
                x=float(data["x"]),
                y=float(data["y"]),
                width=float(data["width"]),
                height=float(data["height"]),
                confidence=float(data["confidence"]),
                block=int(data.get("block", 0)),
            )
        except (TypeError, ValueError) as e:
            msg = f"Positioned token has a non-numeric field: {e}"
            raise ValueError(msg) from e

    def to_dict(self) -> dict[str, Any]:
        """Convert the token to a plain dict."""
        return {
            "text": self.text,
            "x": self.x,
            "y": self.y,
            "width": self.width,
            "height": self.height,
            "confidence": self.confidence,
            "block": self.block,
        }
