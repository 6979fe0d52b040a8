import numpy as np
import pytest

from polycolumn.errors import SectionInputError
from polycolumn.materials import ACIConcrete, ElasticPlasticSteel, Materials, aci_beta1


@pytest.mark.parametrize("fc, expected", [
    (3.0, 0.85),
    (4.0, 0.85),
    (5.0, 0.80),
    (6.0, 0.75),
    (8.0, 0.65),
    (12.0, 0.65),
])
def test_beta1_rule(fc, expected):
    assert np.isclose(aci_beta1(fc), expected)


def test_beta1_override():
    mat = Materials.from_values(fc=6.0, fy=60.0, beta1=0.9)
    assert mat.beta1 == 0.9
    assert np.isclose(Materials.from_values(fc=6.0, fy=60.0).beta1, 0.75)


def test_steel_stress_is_elastic_perfectly_plastic():
    steel = ElasticPlasticSteel(fy=60.0, E=29000.0)

    assert np.isclose(steel.eps_y, 60.0 / 29000.0)
    assert np.isclose(steel.stress(0.001), 29.0)
    assert steel.stress(0.01) == 60.0
    assert steel.stress(-0.01) == -60.0
    np.testing.assert_allclose(steel.stress(np.array([-np.inf, 0.0, np.inf])), [-60.0, 0.0, 60.0])


def test_block_stress():
    assert np.isclose(ACIConcrete(5.0).block_stress, 4.25)


@pytest.mark.parametrize("kwargs", [
    dict(fc=0.0, fy=60.0),
    dict(fc=4.0, fy=-60.0),
    dict(fc=4.0, fy=60.0, Es=0.0),
    dict(fc=4.0, fy=60.0, eps_cu=0.0),
    dict(fc=4.0, fy=60.0, cover=-1.0),
    dict(fc=4.0, fy=60.0, beta1=1.2),
])
def test_invalid_materials_are_rejected(kwargs):
    with pytest.raises(SectionInputError):
        Materials.from_values(**kwargs)


def test_materials_are_immutable(mat):
    with pytest.raises(AttributeError):
        mat.cover = 2.0


@pytest.mark.parametrize("owner, attribute, value", [
    ("concrete", "fc", 10.0),
    ("concrete", "eps_u", 0.004),
    ("steel", "fy", 80.0),
    ("steel", "E", 1.0),
])
def test_material_constants_are_read_only(mat, owner, attribute, value):
    material = getattr(mat, owner)
    before = getattr(material, attribute)
    with pytest.raises(AttributeError):
        setattr(material, attribute, value)
    assert getattr(material, attribute) == before
