"""
Gabor noise to PNG CLI commands for pygabor.

Command line interface for rendering Gabor noise rasters.
"""

import sys

import click
import numpy as np
from PIL import Image

from ..errors import GaborConfigError
from ..noise.gabor_noise import gabor_noise
from .params_options import build_params, noise_options


@click.command()
@click.argument("output", type=click.Path())
@click.option("--nx", type=int, default=256, show_default=True, help="Raster width")
@click.option("--ny", type=int, default=256, show_default=True, help="Raster height")
@click.option("--spacing", type=float, default=0.02, show_default=True,
              help="Distance between pixels in noise space")
@click.option("-z", "--z", "z", type=float, default=0.0, show_default=True, help="Sampling plane height")
@click.option("--component", type=click.IntRange(0, 2), default=None,
              help="Render one component of the vector noise")
@click.option("--lane-width", type=int, default=4096, show_default=True, help="Lanes evaluated in lock-step")
@click.option("--uint", is_flag=True, default=False,
              help="Save as uint8 (0-255), otherwise save as uint16")
@click.option("--npy", type=click.Path(), default=None, help="Also save the raw values as .npy")
@click.option("--preview", is_flag=True, default=False, help="Show the raster with matplotlib")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
@noise_options
def gabor2png(output, nx, ny, spacing, z, component, lane_width, uint, npy, preview, verbose,
              config_path, **noise):
    """
    Render Gabor noise to a PNG image.

    Noise values in [-1, 1] are mapped linearly to the full grey range.

    OUTPUT: Path of the PNG file to write

    Examples:

        # Default isotropic noise
        pgb-gabor2png noise.png

        # Anisotropic, antialiased, tileable 8-bit texture
        pgb-gabor2png tile.png --anisotropic 1 --direction 1 1 0 --filtered --period 5.12 5.12 0 --uint

        # Parameters from a JSON file
        pgb-gabor2png noise.png --config params.json -v
    """
    try:
        params = build_params(config_path, **noise)
        if verbose:
            click.echo(f"Rendering {nx}x{ny} Gabor noise with {params.to_dict()}...")

        values = gabor_noise(nx, ny, spacing=spacing, z=z, params=params,
                             lane_width=lane_width, component=component)

        if npy is not None:
            np.save(npy, values)
            if verbose:
                click.echo(f"Saved raw values to '{npy}'")

        normalized = np.clip(0.5 * (values + 1.0), 0.0, 1.0)
        if uint:
            img_data = (normalized * 255).astype(np.uint8)
            mode = "L"
        else:
            img_data = (normalized * 65535).astype(np.uint16)
            mode = "I;16"

        Image.fromarray(img_data).save(output)

        if verbose:
            click.echo(f"Done! Mode: {mode}, Range: {values.min():.4f}-{values.max():.4f}")
        else:
            click.echo(f"Wrote '{output}'")

        if preview:
            import matplotlib.pyplot as plt

            plt.imshow(values, cmap="gray", vmin=-1.0, vmax=1.0)
            plt.colorbar()
            plt.title("Gabor noise")
            plt.show()

    except GaborConfigError as e:
        click.echo(f"Error: invalid noise parameters - {e}", err=True)
        sys.exit(1)

    except Exception as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


if __name__ == "__main__":
    gabor2png()
