"""Output variable table of the CryoSat-2 L1R converter.

Each entry maps one RADS output variable to its source expression in the
L1R file and to the way it is brought to 1 Hz:

- ``PASSTHROUGH``: the source is already 1 Hz and is copied as is.
- ``MEAN``: masked mean of the 20 Hz source, with optional RMS output.
- ``TREND``: masked linear trend of the 20 Hz source against time.
- ``DERIVED``: computed by the processor from other fields (time, flags,
  orbit and attitude quantities).

The order of the table is the order of the variables in the pass file.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Optional

__all__ = [
    'Reduction',
    'VariableSpec',
    'L1R_VARIABLES',
    'variables_for',
    'is_mle4',
    'not_fdm',
    'lookup',
]


class Reduction(str, Enum):
    PASSTHROUGH = "passthrough"
    MEAN = "mean"
    TREND = "trend"
    DERIVED = "derived"


def is_mle4(header) -> bool:
    """Waveforms were retracked with the four-parameter model."""
    return header.mle_params == 4


def not_fdm(header) -> bool:
    return not header.fdm


@dataclass(frozen=True)
class VariableSpec:
    """How one output variable is produced.

    ``when`` restricts the variable to files whose header satisfies the
    predicate; files that fail it simply do not contribute the variable.
    """
    target: str
    source: Optional[str]
    reduction: Reduction
    rms_target: Optional[str] = None
    when: Optional[Callable] = None
    attrs: dict = field(default_factory=dict)
    encoding: dict = field(default_factory=dict)

    def applies_to(self, header) -> bool:
        return self.when is None or bool(self.when(header))

    @property
    def outputs(self) -> tuple:
        if self.rms_target is None:
            return (self.target,)
        return (self.target, self.rms_target)


_FLAG_ENCODING = {"dtype": "int16", "_FillValue": -32768}


def _v(target, source, reduction, rms_target=None, when=None, units=None,
       long_name=None, **encoding) -> VariableSpec:
    attrs = {}
    if long_name:
        attrs["long_name"] = long_name
    if units:
        attrs["units"] = units
    return VariableSpec(target, source, reduction, rms_target, when, attrs, encoding)


L1R_VARIABLES: tuple = (
    _v("time", "time", Reduction.DERIVED, units="s", long_name="time (seconds since 1985-01-01 00:00:00 UTC)"),
    _v("lat", "lat", Reduction.PASSTHROUGH, units="degrees_north", long_name="latitude"),
    _v("lon", "lon", Reduction.PASSTHROUGH, units="degrees_east", long_name="longitude"),
    _v("alt_cnes", "alt", Reduction.DERIVED, units="m", long_name="altitude of satellite (CNES orbit)"),
    _v("alt_rate", "alt_rate_20hz", Reduction.MEAN, units="m/s", long_name="altitude rate"),
    _v("flags", "surface_type", Reduction.DERIVED, long_name="engineering flags", **_FLAG_ENCODING),
    _v("range_ku", "range_20hz+drange_20hz-alt_20hz", Reduction.DERIVED, units="m",
       long_name="Ku-band range"),
    _v("range_rms_ku", None, Reduction.DERIVED, units="m", long_name="std dev of Ku-band range"),
    _v("range_numval_ku", None, Reduction.DERIVED, units="count",
       long_name="number of averaged Ku-band range measurements", **_FLAG_ENCODING),
    _v("drange_ku", "drange_20hz", Reduction.TREND, units="m", long_name="Ku-band range correction"),
    _v("drange_cal", "instr_range_corr_20hz", Reduction.MEAN, units="m",
       long_name="internal calibration correction to range"),
    _v("drange_fm", "doppler_corr_20hz", Reduction.MEAN, units="m", long_name="Doppler correction to range"),
    _v("swh_ku", "swh_20hz", Reduction.MEAN, "swh_rms_ku", units="m",
       long_name="significant wave height (Ku-band)"),
    _v("agc_ku", "agc_20hz", Reduction.MEAN, units="dB", long_name="automatic gain control (Ku-band)"),
    _v("sig0_ku", "agc_amp_20hz+dagc_eta_20hz+dagc_alt_20hz+dagc_xi_20hz+dagc_swh_20hz",
       Reduction.MEAN, "sig0_rms_ku", units="dB", long_name="backscatter coefficient (Ku-band)",
       dtype="int16", scale_factor=1e-2, _FillValue=-32768),
    _v("off_nadir_angle2_wf_ku", "xi_sq_20hz", Reduction.MEAN, "off_nadir_angle2_wf_rms_ku",
       when=is_mle4, units="degrees^2", long_name="mispointing from waveform squared"),
    _v("attitude_pitch", "attitude_pitch_20hz", Reduction.DERIVED, units="degrees",
       long_name="platform pitch angle"),
    _v("attitude_roll", "attitude_roll_20hz", Reduction.DERIVED, units="degrees",
       long_name="platform roll angle"),
    _v("attitude_yaw", "attitude_yaw_20hz", Reduction.DERIVED, units="degrees",
       long_name="platform yaw angle"),
    _v("off_nadir_angle2_pf", None, Reduction.DERIVED, units="degrees^2",
       long_name="mispointing from platform squared"),
    _v("flags_star_tracker", "instr_config_flags_20hz", Reduction.DERIVED,
       long_name="star tracker flags", **_FLAG_ENCODING),
    _v("peakiness_ku", "peakiness_20hz", Reduction.MEAN, long_name="peakiness (Ku-band)"),
    _v("mqe", "mqe_20hz", Reduction.MEAN, long_name="mean quadratic error of waveform fit"),
    _v("noise_floor_ku", "noise_20hz", Reduction.MEAN, "noise_floor_rms_ku", units="dB",
       long_name="noise floor (Ku-band)"),
    _v("dry_tropo_ecmwf", "dry_tropo", Reduction.PASSTHROUGH, units="m",
       long_name="ECMWF dry tropospheric correction"),
    _v("wet_tropo_ecmwf", "wet_tropo", Reduction.PASSTHROUGH, units="m",
       long_name="ECMWF wet tropospheric correction"),
    _v("iono_bent", "iono_model", Reduction.PASSTHROUGH, units="m",
       long_name="Bent ionospheric correction"),
    _v("iono_gim", "iono_gim", Reduction.PASSTHROUGH, units="m", long_name="GIM ionospheric correction"),
    _v("inv_bar_static", "inv_baro", Reduction.PASSTHROUGH, units="m",
       long_name="inverse barometer correction"),
    _v("inv_bar_mog2d", "inv_baro+dac", Reduction.PASSTHROUGH, when=not_fdm, units="m",
       long_name="MOG2D dynamic atmospheric correction"),
    _v("tide_solid", "tide_solid", Reduction.PASSTHROUGH, units="m", long_name="solid earth tide"),
    _v("tide_ocean_got00", "tide_ocean", Reduction.PASSTHROUGH, units="m",
       long_name="GOT00.2 ocean tide"),
    _v("tide_load_got00", "tide_load", Reduction.PASSTHROUGH, units="m", long_name="GOT00.2 load tide"),
    _v("tide_pole", "tide_pole", Reduction.PASSTHROUGH, units="m", long_name="pole tide"),
    _v("tide_equil", "tide_lp", Reduction.PASSTHROUGH, units="m", long_name="long-period equilibrium tide"),
)


def variables_for(header) -> list:
    """Return the table entries that apply to a file, in output order."""
    return [spec for spec in L1R_VARIABLES if spec.applies_to(header)]


def lookup(name: str) -> Optional[VariableSpec]:
    """Return the table entry producing ``name`` (value or RMS output)."""
    for spec in L1R_VARIABLES:
        if name in spec.outputs:
            return spec
    return None
