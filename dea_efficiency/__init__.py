# dea_efficiency/__init__.py

"""
Paquete dea_efficiency: modelos DEA resueltos DMU a DMU con cvxpy.
Al importar dea_efficiency, podrás acceder a:

- radial: CCR/BCC radial (input/output) con holguras en segunda etapa
- additive: modelo aditivo ponderado (Ones, MIP, Normalized, RAM, BAM, Custom)
- directional: función de distancia direccional (DDF) y generalizada (GDF)
- profit / revenue: eficiencia de beneficio e ingreso con descomposición
- decompose: descomposición técnica/asignativa y eficiencia de escala
- results: DEAResult, resultado común a todos los modelos
- solver: SolverOptions (solver, tolerancias, hilos, tiempo límite)
"""

from .radial import run_radial
from .additive import run_additive
from .directional import run_ddf, run_gdf
from .profit import run_profit
from .revenue import run_revenue
from .decompose import scale_efficiency
from .results import DEAResult
from .engine import SolverWarning
from .solver import SolverOptions
from .options import AdditiveWeights, Direction, Disposal, ModelKind, Orientation, RTS
from .exceptions import DEAConfigError, DEADataError, DEAError, DEAShapeError
from .utils import frame_to_matrices, validate_dataframe
