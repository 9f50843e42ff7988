"""
Gabor noise statistics CLI commands for pygabor.

Samples the noise at random points and compares the sample moments with the
closed-form variance.
"""

import sys

import click
import numpy as np

from ..errors import GaborConfigError
from ..noise.evaluator import GaborEvaluator
from ..noise.statistics import predicted_variance, sample_moments
from .params_options import build_params, noise_options


@click.command()
@click.option("--samples", "-n", type=int, default=4000, show_default=True, help="Number of random points")
@click.option("--extent", type=float, default=500.0, show_default=True,
              help="Points are drawn uniformly in [0, extent]^3")
@click.option("--sample-seed", type=int, default=0, show_default=True, help="Seed for the sample points")
@click.option("--lane-width", type=int, default=4096, show_default=True, help="Lanes evaluated in lock-step")
@noise_options
def gabor_stats(samples, extent, sample_seed, lane_width, config_path, **noise):
    """
    Print the mean and variance of Gabor noise at random points.

    The closed-form variance only applies to unfiltered noise.

    Examples:

        pgb-gabor-stats -n 10000 --bandwidth 2
    """
    try:
        if samples < 2:
            raise click.BadParameter("at least two samples are required", param_hint="--samples")
        params = build_params(config_path, **noise)
        evaluator = GaborEvaluator(params, lane_width=lane_width)

        rng = np.random.default_rng(sample_seed)
        points = rng.random((samples, 3)) * extent
        mean, variance = sample_moments(evaluator.evaluate(points))
        expected = predicted_variance(evaluator.setup)

        click.echo(f"samples:            {samples}")
        click.echo(f"mean:               {mean:.6f}")
        click.echo(f"variance:           {variance:.6f}")
        click.echo(f"predicted variance: {expected:.6f}")
        if params.filtered:
            click.echo("Warning: filtered noise has a lower variance than predicted", err=True)

    except click.BadParameter:
        raise

    except GaborConfigError as e:
        click.echo(f"Error: invalid noise parameters - {e}", err=True)
        sys.exit(1)

    except Exception as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


if __name__ == "__main__":
    gabor_stats()
