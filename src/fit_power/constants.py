"""Physical constants and empirical thresholds used by the power model."""

GRAVITY = 9.80  # m/s²

# Barometric formula (dry air)
SEA_LEVEL_PRESSURE = 101325.0  # Pa
MOLAR_MASS_DRY_AIR = 0.0289644  # kg/mol
UNIVERSAL_GAS_CONSTANT = 8.31446  # J/(mol·K)
SPECIFIC_GAS_CONSTANT_DRY_AIR = 287.05  # J/(kg·K)

# Magnus-type saturation vapor pressure
MAGNUS_BASE_PRESSURE = 610.78  # Pa
MAGNUS_COEFFICIENT = 17.27

ZERO_CELSIUS_K = 273.15
KPH_PER_MPS = 3.6

DEFAULT_DRIVETRAIN_PENALTY = 0.02
DEFAULT_HUMIDITY_PERCENT = 50.0
DEFAULT_TEMPERATURE_C = 25.0

# Estimates above this are treated as spikes from bad speed/gradient data
MAX_PLAUSIBLE_POWER_W = 2000.0

# Cubic solver
CUBIC_EPSILON = 1e-6
ROOT_TOLERANCE = 1e-6
