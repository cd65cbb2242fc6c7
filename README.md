# fundamod

Modular-synthesizer building blocks for Python. Each module runs one sample
at a time. On each call to `process(args)` it reads voltages from its input
ports and writes voltages to its output ports. Ports are polyphonic and carry
up to 16 channels each.

## Installation

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Modules

| Module | Class | What it does |
|---|---|---|
| `fundamod.adsr` | `ADSR` | Polyphonic exponential attack/decay/sustain/release envelope with retrigger and push button |
| `fundamod.lfo` | `LFO` | Low-frequency oscillator with sine, triangle, saw and square outputs, clock sync, reset and pulse width |
| `fundamod.delay` | `Delay` | Clockable delay line with feedback, tone and dry/wet mix |
| `fundamod.noise` | `Noise` | White, pink, red, violet, blue, gray and black noise (`PinkNoiseGenerator` and `InverseAWeightingFilter` are also available on their own) |
| `fundamod.gates` | `Gates` | Rising and falling edge triggers, flip/flop, gate lengthener and gate delay |
| `fundamod.logic` | `Logic` | NOT A, NOT B, OR, NOR, AND, NAND, XOR and XNOR on gate signals |
| `fundamod.compare` | `Compare` | Maximum, minimum, clip and limit, and comparator gates |
| `fundamod.fade` | `Fade` | Crossfader with a linear or -3 dB (square-root) pan law |
| `fundamod.midside` | `MidSide` | Mid/side encoder and decoder, each with a width control |
| `fundamod.mixer` | `Mixer` | Six-input mixer with level, invert and average options |
| `fundamod.cvmix` | `CVMix` | Three attenuverted CV inputs, each normalled to 10 V, summed |
| `fundamod.eightvert` | `EightVert` | Eight attenuverters; unpatched rows take the signal of the row above, and the first row is normalled to 10 V |
| `fundamod.mutes` | `Mutes` | Ten mute switches; unpatched rows take the signal of the row above |
| `fundamod.mult` | `Mult` | Copies one polyphonic input to eight outputs |
| `fundamod.merge` | `Merge` | Merges 16 mono inputs into one polyphonic output, with an automatic or fixed channel count |
| `fundamod.octave` | `Octave` | Shifts a 1 V/octave pitch by whole octaves |

`fundamod.engine` holds the shared engine: `Module`, `Port`, `Param`, `Light`
and `ProcessArgs`. `fundamod.dsp` holds the DSP primitives: `ClockDivider`,
`SchmittTrigger`, `BooleanTrigger`, `PulseGenerator`, `Timer`, `RCFilter`,
`clamp`, `crossfade` and `exp2_taylor5`.

## Example

```python
from fundamod.adsr import ADSR
from fundamod.engine import ProcessArgs

adsr = ADSR()
gate = adsr.inputs[ADSR.GATE_INPUT]
gate.connect(1)
gate.set_voltage(10.0, 0)
adsr.outputs[ADSR.ENVELOPE_OUTPUT].connect(1)

args = ProcessArgs(sample_rate=44100.0)  # args.sample_time is 1 / 44100
for _ in range(1000):
    adsr.process(args)

print(adsr.outputs[ADSR.ENVELOPE_OUTPUT].get_voltage(0))
```

A port with zero channels counts as unpatched. `Port.connect(channels)`
patches it and `Port.disconnect()` unpatches it. Several modules skip work for
outputs that are not connected, so connect every output you want to read.

`Noise(seed=...)` takes an optional seed, so its output can be reproduced.

## Saving and restoring state

A module's state is a plain dictionary. `Module.to_json()` returns it and
`Module.from_json(data)` loads it. The dictionary holds a `"params"` list of
parameter values. When a module has state of its own, it also holds a
`"data"` entry:

- `Fade` stores its pan law.
- `Merge` stores its channel count, where -1 means automatic.
- `Mixer` stores its invert and average flags.

Some patches come from older layouts, and these are handled as well:

- `ADSR` sets its CV attenuators to 1 before it loads params, so a patch that
  leaves them out keeps full CV depth.
- `Delay` does the same for its feedback, tone and mix CV attenuators.
- `Mutes` reads mute states stored under `"states"` in the data.
- `Octave` reads an octave shift stored under `"octave"` in the data.

## What this package does not do

The package only computes signals. It has no audio input or output, no sound
file reading or writing, no graphical panels or knobs, and no host that wires
modules together with cables or runs them in real time. To connect modules,
copy voltages from one module's output ports to another's input ports between
calls to `process`. Bypassing a module is left to the caller, who can call
`Module.process_bypass(args)` in place of `process(args)`.