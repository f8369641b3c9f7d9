"""
Regression configuration value objects.

A configuration surface (UI, notebook, service request) produces a
RegressionConfig; the engine consumes it and never mutates it. Invalid
combinations are rejected at construction so the engine can trust them.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from pylinreg.core.exceptions import ValidationError

VariableKind = Literal['numeric', 'categorical']
CIMethod = Literal['normal', 't']

_KINDS = ('numeric', 'categorical')
_CI_METHODS = ('normal', 't')


def _check_transform_flags(name: str, log_transform: bool, log_plus_one: bool) -> None:
    if log_plus_one and not log_transform:
        raise ValidationError(
            f"{name}: log_plus_one requires log_transform"
        )


def transform_prefix(log_transform: bool, log_plus_one: bool) -> str:
    """Column-name prefix for a transform: '', 'ln_' or 'ln1p_'."""
    if not log_transform:
        return ''
    return 'ln1p_' if log_plus_one else 'ln_'


@dataclass(frozen=True)
class VariableConfig:
    """
    One feature of the model.

    Attributes:
        name: Column name in the source rows
        kind: 'numeric' or 'categorical'
        log_transform: Use ln(x) (numeric only)
        log_plus_one: Use ln(1 + x) instead (requires log_transform)
    """
    name: str
    kind: VariableKind = 'numeric'
    log_transform: bool = False
    log_plus_one: bool = False

    def __post_init__(self) -> None:
        if not isinstance(self.name, str) or not self.name:
            raise ValidationError(f"variable name must be a non-empty string, got {self.name!r}")
        if self.kind not in _KINDS:
            raise ValidationError(
                f"{self.name}: unknown kind {self.kind!r}, expected one of {_KINDS}"
            )
        if self.kind == 'categorical' and (self.log_transform or self.log_plus_one):
            raise ValidationError(
                f"{self.name}: categorical variables cannot be log transformed"
            )
        _check_transform_flags(self.name, self.log_transform, self.log_plus_one)

    @classmethod
    def numeric(cls, name: str, *, log: bool = False, plus_one: bool = False) -> VariableConfig:
        return cls(name, 'numeric', log_transform=log or plus_one, log_plus_one=plus_one)

    @classmethod
    def categorical(cls, name: str) -> VariableConfig:
        return cls(name, 'categorical')

    @property
    def is_categorical(self) -> bool:
        return self.kind == 'categorical'

    @property
    def column_name(self) -> str:
        """Design-matrix column name of a numeric variable."""
        return transform_prefix(self.log_transform, self.log_plus_one) + self.name


@dataclass(frozen=True)
class RegressionConfig:
    """
    Everything that determines a regression run besides the rows.

    Attributes:
        target: Target column name
        features: Feature variables, in design-matrix order. May be empty
            (intercept-only model).
        target_log_transform: Fit ln(y)
        target_log_plus_one: Fit ln(1 + y) instead
        bootstrap_iterations: Replicate count; None selects 50 for
            n <= 2000 and 20 above
        seed: Bootstrap RNG seed; None draws fresh entropy
        n_jobs: Bootstrap worker threads (1 = sequential, -1 = all cores)
        ci_method: 'normal' uses the fixed 1.96 critical value, 't' the
            Student t quantile with n - k degrees of freedom
    """
    target: str
    features: tuple[VariableConfig, ...] = ()
    target_log_transform: bool = False
    target_log_plus_one: bool = False
    bootstrap_iterations: int | None = None
    seed: int | None = None
    n_jobs: int = 1
    ci_method: CIMethod = 'normal'

    def __post_init__(self) -> None:
        if not isinstance(self.target, str) or not self.target:
            raise ValidationError(f"target must be a non-empty string, got {self.target!r}")
        # Accept any iterable of VariableConfig; store as a tuple
        object.__setattr__(self, 'features', tuple(self.features))
        for f in self.features:
            if not isinstance(f, VariableConfig):
                raise ValidationError(
                    f"features must be VariableConfig instances, got {type(f).__name__}"
                )

        _check_transform_flags(self.target, self.target_log_transform, self.target_log_plus_one)

        names = [f.name for f in self.features]
        dupes = sorted({n for n in names if names.count(n) > 1})
        if dupes:
            raise ValidationError(f"features listed more than once: {dupes}")
        if self.target in names:
            raise ValidationError(
                f"{self.target}: the target cannot also be a feature"
            )

        if self.bootstrap_iterations is not None and self.bootstrap_iterations < 0:
            raise ValidationError(
                f"bootstrap_iterations must be >= 0, got {self.bootstrap_iterations}"
            )
        if self.n_jobs == 0:
            raise ValidationError("n_jobs must be nonzero")
        if self.ci_method not in _CI_METHODS:
            raise ValidationError(
                f"unknown ci_method {self.ci_method!r}, expected one of {_CI_METHODS}"
            )

    @property
    def numeric_features(self) -> tuple[VariableConfig, ...]:
        return tuple(f for f in self.features if not f.is_categorical)

    @property
    def categorical_features(self) -> tuple[VariableConfig, ...]:
        return tuple(f for f in self.features if f.is_categorical)

    @property
    def transformed_variables(self) -> tuple[str, ...]:
        """Names of every variable (target included) under a log transform."""
        names = [self.target] if self.target_log_transform else []
        names.extend(f.name for f in self.features if f.log_transform)
        return tuple(names)
