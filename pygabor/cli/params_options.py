"""
Shared click options describing NoiseParams.

Options given on the command line override values read from a JSON config file.
"""

import json

import click

from ..noise.params import NoiseParams

_NOISE_OPTIONS = [
    click.option("--config", "config_path", type=click.Path(exists=True, dir_okay=False), default=None,
                 help="JSON file with NoiseParams fields"),
    click.option("--anisotropic", type=click.IntRange(0, 2), default=None,
                 help="0 isotropic, 1 anisotropic, 2 hybrid"),
    click.option("--direction", type=float, nargs=3, default=None,
                 help="Principal direction (x y z)"),
    click.option("--bandwidth", type=float, default=None, help="Bandwidth in octaves"),
    click.option("--impulses", type=float, default=None, help="Mean kernels per truncation sphere"),
    click.option("--filtered", is_flag=True, default=False, help="Antialias with the analytic prefilter"),
    click.option("--period", type=float, nargs=3, default=None,
                 help="Tiling period per axis (0 disables)"),
    click.option("--seed", type=int, default=None, help="Random seed"),
    click.option("--jitter", type=float, default=None, help="Direction jitter (anisotropic only)"),
]


def noise_options(func):
    """Decorate a click command with the NoiseParams options."""
    for option in reversed(_NOISE_OPTIONS):
        func = option(func)
    return func


def build_params(config_path=None, **overrides) -> NoiseParams:
    """
    Assemble NoiseParams from an optional JSON file and command line values.

    None values in overrides are ignored, and so is an unset --filtered flag.
    """
    if not overrides.get("filtered"):
        overrides.pop("filtered", None)
    values = {}
    if config_path is not None:
        with open(config_path, encoding="utf-8") as fh:
            values.update(json.load(fh))
    values.update({k: v for k, v in overrides.items() if v is not None})
    return NoiseParams.from_mapping(values)
