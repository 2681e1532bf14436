from .brightness import *
from .mixture_profiles import *
from .psf import PsfComponent, GaussianMixturePSF, NCircularGaussianPSF
from .wcs import *
from .sky import ConstantSky, GridSky
from .image import *
from .patch import *
from .render import *
from .catalog import *
from .priors import *
from .likelihood import *
from .mcmc import *
from .diagnostics import *
from .driver import *

__version__ = '0.1.0'

__all__ = [
    # brightness
    'BANDS', 'NBANDS', 'REFERENCE_BAND', 'band_index',
    'colors_to_fluxes', 'fluxes_to_colors',
    'nanomaggies_to_mag', 'mag_to_nanomaggies',
    # galaxy profiles
    'GalaxyComponent', 'galaxy_prototypes', 'get_bvn_cov',
    # data
    'PsfComponent', 'GaussianMixturePSF', 'NCircularGaussianPSF',
    'NullWCS', 'AffineWcs', 'ConstantSky', 'GridSky',
    'Image', 'SkyPatch',
    # rendering
    'NumericDegeneracyError', 'get_gaussian_window', 'write_gaussian',
    'write_star_unit_flux', 'write_galaxy_unit_flux',
    'render_patch', 'render_image', 'render_images',
    # catalog
    'CatalogEntry', 'Star', 'Galaxy',
    # priors
    'SourcePrior', 'PriorParams', 'construct_prior',
    'color_logprior', 'position_logprior', 'shape_logprior',
    # likelihood
    'star_param_names', 'galaxy_param_names',
    'poisson_loglike', 'poisson_lnpdf', 'poisson_sample',
    'state_to_catalog_entry', 'catalog_entry_to_state',
    'extract_star_state', 'extract_galaxy_state',
    'StarLogPdf', 'GalaxyLogPdf',
    'make_star_logpdf', 'make_galaxy_logpdf',
    # sampling
    'SamplerError', 'MHChain', 'run_mh_sampler',
    'run_mh_sampler_with_warmup', 'compute_proposal_scale',
    'init_star_params',
    # diagnostics
    'potential_scale_reduction_factor', 'chains_to_table',
    'samples_to_catalog_row', 'catalog_entry_to_catalog_row',
    'write_chains', 'read_chains',
    # driver
    'ChainsResult', 'DEFAULT_MCMC_ARGS', 'run_multi_chain_mcmc',
    'run_single_star_mcmc', 'run_single_galaxy_mcmc',
]
