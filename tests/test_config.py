"""Tests for configuration specs, value classes and presets."""

import json

import numpy as np
import pytest

from crsmod.config import (
    CONFIG,
    DATUM_PRESETS,
    ELLIPSOID_PRESETS,
    GEODESY_CONFIG,
    OSGB36_SHIFT,
    TRANSFORM_CONFIG,
    WGS84,
    Ellipsoid,
    ParameterSpec,
    Wgs84ConversionInfo,
    datum_from_dict,
    datum_to_dict,
    ellipsoid_from_dict,
    get_datum_preset,
    get_ellipsoid_preset,
    load_datum_json,
    save_datum_json,
)
from crsmod.shared import helmert_homogeneous_matrix, helmert_inverse_matrix, helmert_matrix


class TestParameterSpec:
    """Test ParameterSpec validation."""

    spec = ParameterSpec(name="samples", min_value=1, max_value=10, default=4)

    def test_default_for_none(self):
        """Test None selects the default."""
        assert self.spec.validate(None) == 4
        assert self.spec.validate_int(None) == 4

    def test_clamping(self):
        """Test values are clamped to the range."""
        assert self.spec.validate(100) == 10
        assert self.spec.validate(-5) == 1
        assert self.spec.validate_int(3.6) == 4

    def test_rejects_non_numbers(self):
        """Test bools and strings are rejected."""
        with pytest.raises(ValueError, match="expected number"):
            self.spec.validate(True)
        with pytest.raises(ValueError, match="expected number"):
            self.spec.validate("3")


class TestConfig:
    """Test the configuration singleton."""

    def test_defaults(self):
        """Test documented defaults."""
        assert CONFIG.transform.hull_edge_samples.default == 16
        assert CONFIG.transform.identity_tolerance.default == 0.0
        assert CONFIG.geodesy.latitude_tolerance.default == 1e-12
        assert CONFIG.geodesy.max_iterations.default == 20

    def test_aliases(self):
        """Test module-level aliases point at the singleton groups."""
        assert TRANSFORM_CONFIG is CONFIG.transform
        assert GEODESY_CONFIG is CONFIG.geodesy

    def test_get_all_specs(self):
        """Test specs are listed by group."""
        specs = CONFIG.get_all_specs()
        assert set(specs) == {"transform", "geodesy"}
        assert specs["geodesy"]["max_iterations"] is GEODESY_CONFIG.get_spec("max_iterations")


class TestEllipsoid:
    """Test Ellipsoid derived quantities."""

    def test_wgs84(self):
        """Test WGS84 derived axes."""
        assert WGS84.semi_minor_axis == pytest.approx(6356752.314245, abs=1e-6)
        assert WGS84.eccentricity_squared == pytest.approx(0.00669437999014, rel=1e-10)

    def test_sphere(self):
        """Test a sphere has no flattening."""
        sphere = Ellipsoid.sphere(1000.0)
        assert sphere.is_sphere
        assert sphere.eccentricity == 0.0
        assert sphere.semi_minor_axis == 1000.0

    def test_validation(self):
        """Test invalid axes are rejected."""
        with pytest.raises(ValueError, match="semi_major_axis"):
            Ellipsoid(0.0, 298.0)
        with pytest.raises(ValueError, match="inverse_flattening"):
            Ellipsoid(6378137.0, -1.0)


class TestWgs84ConversionInfo:
    """Test the TOWGS84 value class."""

    def test_zero_values(self):
        """Test has_zero_values_only."""
        assert Wgs84ConversionInfo().has_zero_values_only
        assert not Wgs84ConversionInfo(ppm=0.1).has_zero_values_only

    def test_to_matrix(self):
        """Test the homogeneous matrix layout."""
        M = OSGB36_SHIFT.to_matrix()
        v = OSGB36_SHIFT.get_affine_transform()
        assert M.shape == (4, 4)
        assert np.allclose(M[:3, 3], v[4:])
        assert np.allclose(M[3], [0, 0, 0, 1])
        assert np.allclose(M, helmert_homogeneous_matrix(v))

    def test_inverse_matrix(self):
        """Test the closed-form inverse of the linear part."""
        v = OSGB36_SHIFT.get_affine_transform()
        assert np.allclose(helmert_inverse_matrix(v) @ helmert_matrix(v), np.eye(3), atol=1e-14)

    def test_str(self):
        """Test the TOWGS84-style string."""
        assert str(Wgs84ConversionInfo(dx=1.0)) == "1.0, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0"


class TestPresets:
    """Test preset lookup and dict/JSON loading."""

    def test_lookup_case_insensitive(self):
        """Test preset names ignore case."""
        assert get_datum_preset("OSGB36") is OSGB36_SHIFT
        assert get_ellipsoid_preset("WGS84") is WGS84

    def test_unknown_preset(self):
        """Test unknown names list the available presets."""
        with pytest.raises(KeyError, match="Unknown datum preset"):
            get_datum_preset("mars2000")
        with pytest.raises(KeyError, match="Unknown ellipsoid preset"):
            get_ellipsoid_preset("mars2000")

    def test_all_presets_valid(self):
        """Test every preset builds coefficients."""
        for info in DATUM_PRESETS.values():
            assert len(info.get_affine_transform()) == 7
        for ellipsoid in ELLIPSOID_PRESETS.values():
            assert 0.0 < ellipsoid.eccentricity < 0.1

    def test_datum_from_dict_forms(self):
        """Test named fields, TOWGS84 lists and preset references."""
        assert datum_from_dict({"dx": -87, "dy": -98, "dz": -121}).dz == -121
        seven = datum_from_dict({"towgs84": [446.448, -125.157, 542.06, 0.15, 0.247, 0.842, -20.489]})
        assert seven == Wgs84ConversionInfo(446.448, -125.157, 542.06, 0.15, 0.247, 0.842, -20.489)
        three = datum_from_dict({"towgs84": [1, 2, 3]})
        assert (three.dx, three.ppm) == (1.0, 0.0)
        assert datum_from_dict({"preset": "osgb36"}) is OSGB36_SHIFT

    def test_datum_from_dict_bad_length(self):
        """Test TOWGS84 lists must have 3 or 7 values."""
        with pytest.raises(ValueError, match="3 or 7 values"):
            datum_from_dict({"towgs84": [1, 2, 3, 4]})

    def test_ellipsoid_from_dict(self):
        """Test ellipsoid dicts and preset references."""
        e = ellipsoid_from_dict({"semi_major_axis": 6378388.0, "inverse_flattening": 297.0})
        assert e.flattening == pytest.approx(1 / 297.0)
        assert ellipsoid_from_dict({"preset": "grs80"}).name == "GRS 1980"

    def test_json_round_trip(self, tmp_path):
        """Test saving and loading a datum as JSON."""
        path = tmp_path / "osgb36.json"
        save_datum_json(OSGB36_SHIFT, path)
        assert json.loads(path.read_text())["ppm"] == -20.489
        assert load_datum_json(path) == OSGB36_SHIFT
        assert datum_to_dict(OSGB36_SHIFT)["area_of_use"] == "Great Britain"
