# empi

Building blocks for matching pursuit decomposition of single- and
multichannel signals: envelope function families with the integrals needed
to build optimal dictionaries, readers for raw binary signal files, a
thread-safe task queue and semaphore, time-stamped logging, and the helpers
that prepare a decomposition run.

## Envelope families

Two envelope families are available, looked up by name with `get_family`
(an unknown name raises `ValueError`):

```python
from empi.family import get_family

gauss = get_family("gauss")
triangular = get_family("triangular")

gauss.value(0.0)                # peak value of the L²-normalised envelope
gauss.freq_integral(0.5)        # B(x) = ∫ f(t)² cos(2πxt) dt
gauss.inv_time_integral(0.95)   # x such that C(x) = 0.95
triangular.inv_scale_integral(0.9)

# range of sample indices covered by an envelope centred at 100 with scale 20
samples = gauss.compute_range(100.0, 20.0)
samples.includes(100)           # True

# sampled envelope: values, index of the first sample, normalisation factor
values, offset, norm = gauss.generate_values(100.0, 20.0, normalize=True)
```

The triangular family's inverse integrals are solved by bisection
(`Family.solve_integral`) and raise `ValueError` for a value outside the
open interval (0, 1). `GaussianFamily` takes the half-width, in scale units,
beyond which the envelope is treated as zero (3.0 by default).

## Index ranges and rounding

```python
from empi.types import IndexRange, ceil_to_int, floor_to_int, round_to_int

a = IndexRange(0, 10)
b = IndexRange(5, 20)
a.overlap(b)             # IndexRange(first_index=5, end_index=10)
bool(IndexRange(3, 3))   # False: the range is empty

floor_to_int(-0.5)  # -1
ceil_to_int(-0.5)   # 0
round_to_int(2.5)   # 2 (ties to even)
```

The rounding helpers raise `OverflowError` for values outside the 64-bit
signed integer range.

## Reading signals

Signal files are raw, interleaved samples: for every time point, one value per
channel, stored as 32-bit floats (or 64-bit with `input64=True`). Channels and
segments are numbered from 1.

```python
import numpy as np
from empi.prepare import create_signal_reader, select_channels

channels = select_channels("1-2", 4)          # [1, 2]
reader = create_signal_reader(
    "signal.bin",
    channel_count=4,
    selected_channels=channels,
    segment_size=512,
    segment_specs="1-3",
    input64=False,
)

with reader:
    buffer = np.zeros((reader.epoch_channel_count(), reader.epoch_sample_count()))
    while (index := reader.read(buffer)) is not None:
        ...  # buffer holds one segment, index (an EpochIndex) identifies it
```

With `segment_size=0` the whole file is read as a single segment
(`SignalReaderForWholeSignal`); with a segment size and no segment
specification every segment is read in turn (`SignalReaderForAllEpochs`);
with both, only the listed segments (`SignalReaderForSelectedEpochs`). A
truncated last segment is padded with zeros. `SignalReaderSingleChannel`
wraps another reader and hands out its channels one at a time.

## Preparing a run

```python
import sys
from empi.family import get_family
from empi.prepare import (
    BlockStructure,
    ci_ends_with,
    default_scale_range,
    parse_integer_subset,
    write_dictionary_xml,
)

parse_integer_subset("1-3,5", 8)    # [1, 2, 3, 5]
ci_ends_with("book.JSON", ".json")  # True

gauss = get_family("gauss")
scale_min, scale_max = default_scale_range(
    gauss,
    energy_error=0.05,
    scale_min=0.0,       # 0.0 means: choose automatically
    scale_max=0.0,       # 0.0 means: the segment length
    epoch_sample_count=1024,
    full_atoms_in_signal=False,
)

blocks = [BlockStructure(scale=32.0, envelope_length=193, transform_size=256, input_shift=4.0)]
write_dictionary_xml(sys.stdout, [(gauss, blocks)])
```

`parse_integer_subset` raises `ValueError` for an invalid or empty
specification. `write_dictionary_xml` takes pairs of a family and its block
structures and writes the XML description of the dictionary to the stream.

## Concurrency and logging

`empi.taskqueue.TaskQueue` is a producer–consumer queue: producers `put` or
`put_all` tasks and call `wait_for_tasks`; consumers `get` a task and call
`notify` when it is done; `terminate` releases everyone waiting. `get` with
`wait=False` raises `queue.Empty` when no task is available, and a terminated
queue raises `TaskQueueTerminated`. `Semaphore` offers counted `acquire` and
`release`.

`empi.log.log_message(kind, text)` writes a line such as
`[Mon Jan  1 12:00:00 2024] info: text` to standard error or a given stream.
`empi.log.Timer` measures elapsed time; started with a message, it announces
the task and, on `stop` (or leaving its `with` block), prints the elapsed
seconds.

## What this package does not do

It has no decomposition engine: it does not build block dictionaries,
compute spectrograms, search for or optimise atoms, or subtract them from the
signal. It writes no result files (books), reports no progress of a run, and
offers no command-line program. It supplies the pieces around such a run:
envelope families, signal reading, run preparation, task coordination and
logging.