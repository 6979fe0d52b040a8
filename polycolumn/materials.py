#######################################
# Materials module for column section analysis
# Written by: Hossein Karagah
# Date: 2026-10-12
# Description: This module provides the concrete and reinforcing steel models used by the strain compatibility analysis of column sections. Units are kips, inches and ksi unless noted otherwise.
#######################################

from dataclasses import dataclass
from typing import Optional, Union

import numpy as np

from polycolumn.errors import SectionInputError


# Stress block constants per ACI 318-25: 22.2.2.4
STRESS_BLOCK_INTENSITY = 0.85
BETA1_UPPER = 0.85
BETA1_LOWER = 0.65
BETA1_FC_LOW = 4.0  # ksi
BETA1_FC_HIGH = 8.0  # ksi


def aci_beta1(fc: float) -> float:
    """Computes the beta_1 factor of the equivalent rectangular stress block per ACI 318-25:22.2.2.4.3.

    Args:
        fc (float): ksi, Concrete compressive strength.

    Returns:
        float: 0.85 up to 4 ksi, 0.65 from 8 ksi, linear in between.
    """
    if fc <= BETA1_FC_LOW:
        return BETA1_UPPER
    elif fc >= BETA1_FC_HIGH:
        return BETA1_LOWER
    else:
        return BETA1_UPPER - 0.05 * (fc - BETA1_FC_LOW)


class ACIConcrete:
    def __init__(self, fc: float, eps_u: float = 0.003, beta_1: Optional[float] = None) -> None:
        """Concrete with an equivalent rectangular (Whitney) stress block.

        Args:
            fc (float): ksi, Compressive strength.
            eps_u (float, optional): Ultimate compressive strain, positive. Defaults to 0.003 per ACI 318-25:22.2.2.1.
            beta_1 (Optional[float], optional): Override of the stress block depth factor. Defaults to None (ACI rule).
        """
        if fc <= 0:
            raise SectionInputError(f"Concrete compressive strength must be positive, got {fc}.")
        if eps_u <= 0:
            raise SectionInputError(f"Concrete ultimate strain must be positive, got {eps_u}.")
        if beta_1 is not None and not 0 < beta_1 <= 1:
            raise SectionInputError(f"beta_1 override must be in (0, 1], got {beta_1}.")
        self._fc = fc
        self._eps_u = eps_u
        self._beta_1 = beta_1
        self.name = "ACI Concrete"

    @property
    def fc(self) -> float:
        return self._fc

    @property
    def eps_u(self) -> float:
        return self._eps_u

    @property
    def beta_1(self) -> float:
        """Returns the stress block depth factor, the override if one was given."""
        return self._beta_1 if self._beta_1 is not None else aci_beta1(self.fc)

    @property
    def block_stress(self) -> float:
        "Returns the uniform stress of the equivalent rectangular stress block (0.85 fc) in ksi."
        return STRESS_BLOCK_INTENSITY * self.fc

    def __repr__(self):
        return f"Concrete Material: {self.name}, fc: {self.fc} ksi, eps_u: {self.eps_u:.2e}, beta_1: {self.beta_1:.3f}"


class ElasticPlasticSteel:
    def __init__(self, fy: float, E: float = 29000.0, name: str = "Grade 60") -> None:
        """Reinforcing steel with an elastic-perfectly plastic stress-strain curve.

        Args:
            fy (float): ksi, Yield strength.
            E (float, optional): ksi, Modulus of elasticity. Defaults to 29000.
            name (str, optional): Designation of the steel. Defaults to "Grade 60".
        """
        if fy <= 0:
            raise SectionInputError(f"Steel yield strength must be positive, got {fy}.")
        if E <= 0:
            raise SectionInputError(f"Steel elastic modulus must be positive, got {E}.")
        self.name = name
        self._fy = fy
        self._E = E

    @property
    def fy(self) -> float:
        return self._fy

    @property
    def E(self) -> float:
        return self._E

    @property
    def eps_y(self) -> float:
        "Returns strain at yield point (eps_y) for steel."
        return self.fy / self.E

    def stress(self, eps: Union[float, np.ndarray]) -> Union[float, np.ndarray]:
        """Calculate the stress from the strain, clamped to the yield strength in both directions.

        Args:
            eps (Union[float, np.ndarray]): Strain value(s), compression positive.

        Returns:
            Union[float, np.ndarray]: Stress value(s) in ksi, compression positive.
        """
        stress = np.clip(np.asarray(eps, dtype=float) * self.E, -self.fy, self.fy)
        return stress.item() if np.isscalar(eps) else stress

    def __repr__(self):
        return f"Steel Material: {self.name}, fy: {self.fy} ksi, E: {self.E} ksi, eps_y: {self.eps_y:.2e}"


@dataclass(frozen=True)
class Materials:
    """Material constants of one column analysis. Immutable for the duration of an analysis."""
    concrete: ACIConcrete
    steel: ElasticPlasticSteel
    cover: float = 0.0

    def __post_init__(self):
        if self.cover < 0:
            raise SectionInputError(f"Cover must be non-negative, got {self.cover}.")

    @classmethod
    def from_values(cls, fc: float, fy: float, Es: float = 29000.0, eps_cu: float = 0.003,
                    cover: float = 0.0, beta1: Optional[float] = None) -> 'Materials':
        """Builds the material set from the six scalar constants of an input definition."""
        return cls(ACIConcrete(fc, eps_cu, beta1), ElasticPlasticSteel(fy, Es), cover)

    @property
    def fc(self) -> float:
        return self.concrete.fc

    @property
    def eps_cu(self) -> float:
        return self.concrete.eps_u

    @property
    def beta1(self) -> float:
        return self.concrete.beta_1

    @property
    def fy(self) -> float:
        return self.steel.fy

    @property
    def Es(self) -> float:
        return self.steel.E
