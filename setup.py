from setuptools import setup, find_packages

setup(
    name="multicomplex_nus",
    version="0.1.0",
    packages=find_packages(exclude=["tests", "tests.*", "examples"]),
    install_requires=[
        "numpy",
        "matplotlib",
    ],
    extras_require={
        "tests": [
            "scipy",
            "pytest",
            "absl-py",
        ],
    },
    description="Multicomplex arrays, mixed-radix FFTs and iterative soft "
                "thresholding for non-uniformly sampled data.",
    keywords="multicomplex, hypercomplex, fft, non-uniform sampling, nmr, signal processing",
    python_requires=">=3.10",
    license="MIT",
)
