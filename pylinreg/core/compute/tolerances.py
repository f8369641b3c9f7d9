"""
Numerical constants for the regression engine.

These values define error behavior (which matrices count as singular,
which columns count as constant or duplicated) and must stay fixed for
results to be reproducible across versions.
"""

# Gauss-Jordan pivot magnitude below which a row swap is attempted.
# If no lower row has a usable pivot the matrix is singular.
PIVOT_TOLERANCE = 1e-10

# Two columns are duplicates when every elementwise difference is below this.
EQUALITY_TOLERANCE = 1e-9

# Range (pre-fit check) or standard deviation (correlation, VIF) below
# which a column counts as constant.
VARIANCE_TOLERANCE = 1e-9

# Normal-approximation critical value for 95% confidence intervals.
CI_CRITICAL_VALUE = 1.96
CI_LEVEL = 0.95

# |standardized residual| above which a row is flagged as an outlier.
OUTLIER_THRESHOLD = 2.5

# |t| above which a coefficient is reported as significant in the
# narrative summary.
SIGNIFICANCE_T_THRESHOLD = 2.0

# Bootstrap iteration rule: fewer replicates for large n, since each
# refit costs O(k^3 + n k^2).
BOOTSTRAP_ITERATIONS_SMALL = 50
BOOTSTRAP_ITERATIONS_LARGE = 20
BOOTSTRAP_LARGE_N = 2000

# Empirical percentile positions for the bootstrap interval.
BOOTSTRAP_LOW_QUANTILE = 0.025
BOOTSTRAP_HIGH_QUANTILE = 0.975


def bootstrap_iterations(n: int) -> int:
    """Default number of bootstrap replicates for n observations."""
    if n <= BOOTSTRAP_LARGE_N:
        return BOOTSTRAP_ITERATIONS_SMALL
    return BOOTSTRAP_ITERATIONS_LARGE
