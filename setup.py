from setuptools import setup

setup(
    name="skymcmc",
    version="0.1.0",
    packages=['skymcmc'],
    python_requires='>=3.8',
    install_requires=[
        'numpy',
        'scipy',
        'fitsio',
    ],
    extras_require={
        'test': ['pytest'],
    },
    license="GPLv2",
    description="MCMC sampling of star and galaxy parameters in SDSS images",
    long_description="Renders PSF-convolved mixture-of-Gaussians star and galaxy models, evaluates a Poisson pixel likelihood with priors, and samples source parameters with multi-chain Metropolis-Hastings.",
    classifiers=[
        "Development Status :: 2 - Pre-Alpha",
        "Intended Audience :: Science/Research",
        "License :: OSI Approved :: GNU General Public License (GPL)",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
    ],
)
