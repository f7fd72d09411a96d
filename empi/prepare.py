"""Preparation of a decomposition: subset parsing, reader selection and dictionary export."""

from __future__ import annotations

import math
import os
import re
from dataclasses import dataclass
from typing import Iterable, TextIO

import numpy as np

from .family import Family
from .signal_reader import (
    SignalReader,
    SignalReaderForAllEpochs,
    SignalReaderForSelectedEpochs,
    SignalReaderForWholeSignal,
)

__all__ = [
    "BlockStructure",
    "ci_ends_with",
    "create_signal_reader",
    "default_scale_range",
    "parse_integer_subset",
    "select_channels",
    "write_dictionary_xml",
]

_INT_MAX = 2**31 - 1
_SUBSET_ITEM = re.compile(r"\s*([+-]?\d+)(?:-\s*([+-]?\d+))?")


@dataclass(frozen=True)
class BlockStructure:
    """Layout of one dictionary block."""

    scale: float
    envelope_length: int
    transform_size: int
    input_shift: float


def parse_integer_subset(text: str, maximum: int) -> list[int]:
    """Parse a specification such as "1-3,5,8-9" into a list of numbers in 1..maximum."""
    pieces = text.split(",")
    if pieces and pieces[-1] == "":
        pieces.pop()
    numbers: list[int] = []
    for piece in pieces:
        match = _SUBSET_ITEM.match(piece)
        if match is None:
            raise ValueError("Configuration contains invalid subset specification")
        start = int(match.group(1))
        if match.group(2) is not None:
            end = int(match.group(2))
            if start < 1 or end > maximum:
                raise ValueError("Configuration contains invalid subset specification")
            numbers.extend(range(start, end + 1))
        else:
            if not 1 <= start <= maximum:
                raise ValueError("Configuration contains invalid subset specification")
            numbers.append(start)
    if not numbers:
        raise ValueError("Configuration contains empty subset specification")
    if len(numbers) > _INT_MAX:
        raise ValueError("Configuration contains too large subset specification")
    return numbers


def ci_ends_with(string: str, suffix: str) -> bool:
    """Check whether string ends with suffix, ignoring case."""
    return string.lower().endswith(suffix.lower())


def select_channels(channel_specs: str, channel_count: int) -> list[int]:
    """Channels (numbered from 1) selected by the specification; all if it is empty."""
    if channel_count <= 0:
        raise ValueError("Number of channels is invalid")
    if not channel_specs:
        return list(range(1, channel_count + 1))
    return parse_integer_subset(channel_specs, channel_count)


def create_signal_reader(
    path: str | os.PathLike[str],
    channel_count: int,
    selected_channels: Iterable[int],
    segment_size: int,
    segment_specs: str,
    input64: bool,
) -> SignalReader:
    """Create the reader matching the segmentation settings."""
    dtype = np.float64 if input64 else np.float32
    if segment_size > 0:
        if segment_specs:
            epochs = parse_integer_subset(segment_specs, _INT_MAX // segment_size)
            return SignalReaderForSelectedEpochs(
                path, channel_count, selected_channels, segment_size, epochs, dtype
            )
        return SignalReaderForAllEpochs(path, channel_count, selected_channels, segment_size, dtype)
    return SignalReaderForWholeSignal(path, channel_count, selected_channels, dtype)


def default_scale_range(
    family: Family,
    energy_error: float,
    scale_min: float,
    scale_max: float,
    epoch_sample_count: int,
    full_atoms_in_signal: bool,
) -> tuple[float, float]:
    """Resolve the (scale_min, scale_max) pair; zero means "choose automatically"."""
    if scale_min == 0.0:
        # shortest scale for which the time step does not go below one sample
        scale_min = 1 / family.inv_time_integral(1 - energy_error)
    if scale_max == 0.0:
        scale_max = float(epoch_sample_count)
    if full_atoms_in_signal:
        in_signal = (epoch_sample_count - 1) / (family.max_arg() - family.min_arg())
        scale_max = min(scale_max, in_signal)
    return scale_min, scale_max


def write_dictionary_xml(
    stream: TextIO, structures: Iterable[tuple[Family, Iterable[BlockStructure]]]
) -> None:
    """Write the dictionary layout as XML; structures are (family, block structures) pairs."""
    stream.write(
        '<?xml version="1.0" encoding="ISO-8859-1"?>\n'
        "<dict>\n"
        "<libVersion>0.2</libVersion>\n"
    )
    for family, blocks in structures:
        lower = family.name
        upper = lower.upper()
        stream.write(f'<blockproperties name="{upper}-WINDOW">\n')
        stream.write(f'<param name="windowtype" value="{lower}"/>\n')
        stream.write("</blockproperties>\n")
        block_type = "gabor" if lower == "gauss" else lower
        for bs in blocks:
            ratio = bs.scale / (bs.envelope_length + 1)
            opt = 0.5 / math.pi * ratio * ratio
            stream.write(f'<block uses="{upper}-WINDOW">\n')
            stream.write(f'<param name="type" value="{block_type}"/>\n')
            stream.write(f'<param name="windowLen" value="{bs.envelope_length:d}"/>\n')
            stream.write(f'<param name="windowShift" value="{bs.input_shift:g}"/>\n')
            stream.write(f'<param name="windowopt" value="{opt:f}"/>\n')
            stream.write(f'<param name="fftSize" value="{bs.transform_size:d}"/>\n')
            stream.write("</block>\n")
    stream.write("</dict>\n")