# dea_efficiency/constants.py

"""
Parámetros globales y constantes para todos los modelos DEA.
"""

# Denominadores por debajo de este valor se consideran nulos
EPS = 1e-9

# Umbral para limpiar ruido en lambdas y holguras
ZERO_TOLERANCE = 1e-8

# Solver por defecto y sus tolerancias (ECOS)
DEFAULT_SOLVER = "ECOS"
DEFAULT_ABSTOL = 1e-9
DEFAULT_RELTOL = 1e-9
DEFAULT_FEASTOL = 1e-9
DEFAULT_MAX_ITER = 10000

# Número de hilos para el bucle por DMU (1 = secuencial)
DEFAULT_WORKERS = 1

# Estados del solver que consideramos óptimos
OPTIMAL_STATUSES = ("optimal", "optimal_inaccurate")

# Estados propios del adaptador (no los emite cvxpy)
STATUS_TIME_LIMIT = "time_limit"
STATUS_SOLVER_ERROR = "solver_error"

# Variables de entorno leídas por SolverOptions.from_env()
ENV_SOLVER = "DEA_SOLVER"
ENV_WORKERS = "DEA_WORKERS"
ENV_TIMEOUT = "DEA_TIMEOUT"
