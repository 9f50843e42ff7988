from setuptools import find_packages, setup

with open("README.md", encoding="utf-8") as fh:
    long_description = fh.read()

setup(
    name="pygabor",
    version="0.0.1",
    description="Band-limited, tileable Gabor noise with exact derivatives",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(include=["pygabor", "pygabor.*"]),
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Science/Research",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Multimedia :: Graphics",
        "Topic :: Scientific/Engineering :: Mathematics",
    ],
    python_requires=">=3.9",
    install_requires=[
        "numpy>=1.20.0",
        "matplotlib>=3.3.0",
        "click>=7.0",
        "pillow>=8.0.0",
    ],
    extras_require={
        "dev": [
            "pytest>=6.0",
            "pytest-cov",
            "black",
            "flake8",
        ],
        "taichi": [
            "taichi>=1.4.0",
        ],
    },
    keywords="procedural noise gabor texture sparse convolution",
    entry_points={
        "console_scripts": [
            "pgb-gabor2png=pygabor.cli.gabor2png_commands:gabor2png",
            "pgb-gabor-stats=pygabor.cli.stats_commands:gabor_stats",
        ],
    },
)
