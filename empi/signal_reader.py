"""Readers of raw multi-channel binary signal files, split into epochs."""

from __future__ import annotations

import os
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass, replace
from typing import Iterable, Optional, Sequence

import numpy as np

__all__ = [
    "EpochIndex",
    "SignalReader",
    "SignalReaderForAllEpochs",
    "SignalReaderForSelectedEpochs",
    "SignalReaderForWholeSignal",
    "SignalReaderSingleChannel",
]


@dataclass(frozen=True, order=True)
class EpochIndex:
    """Position of an epoch: sequential counter, offset in the file and channel offset."""

    epoch_counter: int
    epoch_offset: int
    channel_offset: int = 0


class SignalReader(ABC):
    """Source of signal epochs; read() fills a (channels × samples) buffer."""

    def __init__(self) -> None:
        self._lock = threading.Lock()

    @abstractmethod
    def epoch_channel_count(self) -> int:
        """Number of channels in each epoch returned by read()."""

    @abstractmethod
    def epoch_count(self) -> int:
        """Number of epochs this reader will produce."""

    @abstractmethod
    def epoch_sample_count(self) -> int:
        """Number of samples in each epoch."""

    @abstractmethod
    def read(self, buffer: np.ndarray) -> Optional[EpochIndex]:
        """Fill the buffer with the next epoch; return its index, or None at the end."""

    def close(self) -> None:
        """Release any resources held by the reader."""

    def __enter__(self) -> SignalReader:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


class _FileSignalReader(SignalReader):
    """Reader of interleaved samples (all channels of sample 0, then sample 1, ...)."""

    def __init__(
        self,
        path: str | os.PathLike[str],
        channel_count: int,
        selected_channels: Iterable[int],
        dtype: np.dtype | type = np.float32,
    ) -> None:
        super().__init__()
        if channel_count <= 0:
            raise ValueError("invalid number of channels")
        selected = tuple(selected_channels)
        if any(not 1 <= channel <= channel_count for channel in selected):
            raise ValueError("selected channel out of range")
        self._dtype = np.dtype(dtype)
        if self._dtype.kind != "f":
            raise ValueError("signal samples must be floating point")
        self._selected = selected
        self._channel_indices = np.array(selected, dtype=np.intp) - 1
        self._channel_count = channel_count
        self._frame_size = self._dtype.itemsize * channel_count
        self._file = open(path, "rb")
        self._file_size = os.fstat(self._file.fileno()).st_size

    def epoch_channel_count(self) -> int:
        return len(self._selected)

    def close(self) -> None:
        self._file.close()

    def _read_into_buffer(self, buffer: np.ndarray) -> int:
        if buffer.ndim != 2 or buffer.shape[0] != len(self._selected):
            raise ValueError("buffer has invalid height")
        length = buffer.shape[1]
        raw = self._file.read(length * self._frame_size)
        samples = len(raw) // self._frame_size
        if samples:
            frames = np.frombuffer(raw, dtype=self._dtype, count=samples * self._channel_count)
            frames = frames.reshape(samples, self._channel_count)
            buffer[:, :samples] = frames[:, self._channel_indices].T
        return samples


class SignalReaderForAllEpochs(_FileSignalReader):
    """Reads consecutive epochs of fixed length; the last one may be zero-padded."""

    def __init__(
        self,
        path: str | os.PathLike[str],
        channel_count: int,
        selected_channels: Iterable[int],
        epoch_sample_count: int,
        dtype: np.dtype | type = np.float32,
    ) -> None:
        if epoch_sample_count <= 0:
            raise ValueError("invalid epoch size")
        super().__init__(path, channel_count, selected_channels, dtype)
        self._epoch_sample_count = epoch_sample_count
        self._epochs_read = 0

    def epoch_count(self) -> int:
        if not self._file_size:
            return 0
        return (self._file_size - 1) // (self._frame_size * self._epoch_sample_count) + 1

    def epoch_sample_count(self) -> int:
        return self._epoch_sample_count

    def _read_unlocked(self, buffer: np.ndarray) -> Optional[EpochIndex]:
        if buffer.ndim != 2 or buffer.shape[1] != self._epoch_sample_count:
            raise ValueError("buffer has invalid length")
        samples = self._read_into_buffer(buffer)
        if not samples:
            return None
        if samples < self._epoch_sample_count:
            buffer[:, samples:] = 0
        counter = self._epochs_read
        self._epochs_read += 1
        return EpochIndex(counter, counter)

    def read(self, buffer: np.ndarray) -> Optional[EpochIndex]:
        with self._lock:
            return self._read_unlocked(buffer)


class SignalReaderForSelectedEpochs(SignalReaderForAllEpochs):
    """Reads only the listed epochs (numbered from 1), in the given order."""

    def __init__(
        self,
        path: str | os.PathLike[str],
        channel_count: int,
        selected_channels: Iterable[int],
        epoch_sample_count: int,
        selected_epochs: Sequence[int],
        dtype: np.dtype | type = np.float32,
    ) -> None:
        super().__init__(path, channel_count, selected_channels, epoch_sample_count, dtype)
        self._epochs = list(selected_epochs)
        self._next_epoch = 0

    def epoch_count(self) -> int:
        return len(self._epochs)

    def read(self, buffer: np.ndarray) -> Optional[EpochIndex]:
        with self._lock:
            if self._next_epoch >= len(self._epochs):
                return None
            counter = self._next_epoch
            self._next_epoch += 1
            epoch_offset = self._epochs[counter] - 1
            if epoch_offset < 0:
                raise OSError("could not seek signal file")
            self._file.seek(epoch_offset * self._epoch_sample_count * self._frame_size)
            if self._read_unlocked(buffer) is None:
                return None
            return EpochIndex(counter, epoch_offset)


class SignalReaderForWholeSignal(_FileSignalReader):
    """Reads the entire signal file as a single epoch."""

    def __init__(
        self,
        path: str | os.PathLike[str],
        channel_count: int,
        selected_channels: Iterable[int],
        dtype: np.dtype | type = np.float32,
    ) -> None:
        super().__init__(path, channel_count, selected_channels, dtype)
        self._signal_sample_count = self._file_size // self._frame_size

    def epoch_count(self) -> int:
        return 1

    def epoch_sample_count(self) -> int:
        return self._signal_sample_count

    def read(self, buffer: np.ndarray) -> Optional[EpochIndex]:
        if buffer.ndim != 2 or buffer.shape[1] != self._signal_sample_count:
            raise ValueError("buffer has invalid length")
        with self._lock:
            samples = self._read_into_buffer(buffer)
            if not samples:
                return None
            if samples != self._signal_sample_count:
                raise OSError("could not read from file")
            return EpochIndex(0, 0)


class SignalReaderSingleChannel(SignalReader):
    """Splits each multi-channel epoch of another reader into single-channel epochs."""

    def __init__(self, source: SignalReader) -> None:
        super().__init__()
        self._source = source
        self._epoch = np.zeros((source.epoch_channel_count(), source.epoch_sample_count()))
        self._last_epoch: Optional[EpochIndex] = None

    def epoch_channel_count(self) -> int:
        return 1

    def epoch_count(self) -> int:
        return self._source.epoch_count() * self._source.epoch_channel_count()

    def epoch_sample_count(self) -> int:
        return self._source.epoch_sample_count()

    def close(self) -> None:
        self._source.close()

    def read(self, buffer: np.ndarray) -> Optional[EpochIndex]:
        with self._lock:
            last = self._last_epoch
            if last is None or last.channel_offset + 1 >= self._epoch.shape[0]:
                last = self._source.read(self._epoch)
                self._last_epoch = last
                if last is None:
                    return None
            else:
                last = replace(last, channel_offset=last.channel_offset + 1)
                self._last_epoch = last
            buffer[0, :] = self._epoch[last.channel_offset]
            return last