import io
import json
import tempfile
import unittest
from pathlib import Path

import numpy as np

from robust_scaler import (
	ContractViolation,
	DataFormatError,
	ParameterParseError,
	ParameterReadError,
	ParameterValidationError,
	RobustScaler,
	SklearnScalerParams,
)


def _record(center, scale, n, **extra):
	rec = {"center_": center, "scale_": scale, "n_features_in_": n}
	rec.update(extra)
	return rec


class TestLoadExternalParameters(unittest.TestCase):
	def setUp(self):
		self.tmp = tempfile.TemporaryDirectory()
		self.root = Path(self.tmp.name)
		self.good = _record([3.0, 4.0], [2.0, 2.0], 2)

	def tearDown(self):
		self.tmp.cleanup()

	def _write(self, name, text):
		p = self.root / name
		p.write_text(text, encoding="utf-8")
		return p

	def test_load_from_path(self):
		p = self._write("scaler.json", json.dumps(self.good))
		sc = RobustScaler().load_external_parameters(p)
		np.testing.assert_array_equal(sc.center_, [3.0, 4.0])
		np.testing.assert_array_equal(sc.scale_, [2.0, 2.0])
		self.assertEqual(sc.n_features(), 2)
		self.assertTrue(sc.is_fitted())
		self.assertLess(abs(float(sc.transform_1d([1.0, 2.0])[0]) + 1.0), 1e-5)

	def test_load_from_str_path(self):
		p = self._write("scaler.json", json.dumps(self.good))
		sc = RobustScaler.from_json(str(p))
		self.assertEqual(sc.n_features(), 2)

	def test_load_from_streams(self):
		text = json.dumps(self.good)
		a = RobustScaler().load_external_parameters(io.StringIO(text))
		b = RobustScaler().load_external_parameters(io.BytesIO(text.encode("utf-8")))
		np.testing.assert_array_equal(a.center_, b.center_)
		np.testing.assert_array_equal(a.scale_, b.scale_)

	def test_load_from_mapping(self):
		sc = RobustScaler().load_external_parameters(self.good)
		np.testing.assert_array_equal(sc.transform([[3.0, 4.0]]), [[0.0, 0.0]])

	def test_loaded_matches_locally_fitted(self):
		X = np.array([[1.0, 2.0], [3.0, 4.0], [5.0, 6.0]])
		local = RobustScaler().fit(X)
		loaded = RobustScaler.from_json(self.good)
		np.testing.assert_array_equal(local.transform(X), loaded.transform(X))

	def test_extra_fields_ignored(self):
		rec = _record([0.0], [1.0], 1, feature_names_in_=["x"], quantile_range=[25.0, 75.0])
		sc = RobustScaler.from_json(rec)
		self.assertEqual(sc.n_features(), 1)
		self.assertIsNone(sc.feature_names_in_)

	def test_zero_features(self):
		sc = RobustScaler.from_json(_record([], [], 0))
		self.assertTrue(sc.is_fitted())
		self.assertEqual(sc.n_features(), 0)

	def test_center_length_mismatch_keeps_prior_state(self):
		sc = RobustScaler().fit([[1.0, 2.0], [3.0, 4.0], [5.0, 6.0]])
		center, scale = sc.center_.copy(), sc.scale_.copy()
		p = self._write("bad.json", json.dumps(_record([1.0, 2.0, 3.0], [1.0, 1.0], 2)))
		with self.assertRaises(ParameterValidationError) as ctx:
			sc.load_external_parameters(p)
		err = ctx.exception
		self.assertEqual(err.field, "center_")
		self.assertEqual(err.expected, 2)
		self.assertEqual(err.actual, 3)
		np.testing.assert_array_equal(sc.center_, center)
		np.testing.assert_array_equal(sc.scale_, scale)

	def test_scale_length_mismatch(self):
		with self.assertRaises(ParameterValidationError) as ctx:
			SklearnScalerParams.from_mapping(_record([1.0, 2.0], [1.0], 2))
		self.assertEqual(ctx.exception.field, "scale_")
		self.assertEqual((ctx.exception.expected, ctx.exception.actual), (2, 1))

	def test_failed_load_on_unfit_scaler_stays_unfit(self):
		sc = RobustScaler()
		with self.assertRaises(DataFormatError):
			sc.load_external_parameters(_record([1.0], [1.0], 3))
		self.assertFalse(sc.is_fitted())
		with self.assertRaises(ContractViolation):
			sc.transform([[1.0, 2.0, 3.0]])

	def test_structural_errors(self):
		bad_records = [
			[1, 2, 3],
			{"center_": [1.0], "scale_": [1.0]},
			_record([1.0], [1.0], True),
			_record([1.0], [1.0], 1.0),
			_record([], [], -1),
			_record("1.0", [1.0], 1),
			_record([1.0], ["x"], 1),
			_record([[1.0]], [1.0], 1),
			_record([float("nan")], [1.0], 1),
			_record([1.0], [0.0], 1),
		]
		for rec in bad_records:
			with self.subTest(rec=rec):
				with self.assertRaises(ParameterValidationError):
					SklearnScalerParams.from_mapping(rec)

	def test_missing_file_is_read_error(self):
		with self.assertRaises(ParameterReadError) as ctx:
			RobustScaler().load_external_parameters(self.root / "missing.json")
		self.assertIsInstance(ctx.exception, DataFormatError)
		self.assertIsInstance(ctx.exception.__cause__, OSError)

	def test_non_utf8_is_read_error(self):
		p = self.root / "latin1.json"
		p.write_bytes(b'{"center_": ["\xe9"]}')
		with self.assertRaises(ParameterReadError):
			SklearnScalerParams.read(p)

	def test_invalid_json_is_parse_error(self):
		p = self._write("broken.json", '{"center_": [1.0, "scale_": }')
		with self.assertRaises(ParameterParseError):
			RobustScaler.from_json(p)

	def test_undecodable_text_stream_is_read_error(self):
		stream = io.TextIOWrapper(io.BytesIO(b'{"center_": ["\xe9"]}'), encoding="utf-8")
		with self.assertRaises(ParameterReadError) as ctx:
			RobustScaler().load_external_parameters(stream)
		self.assertIsInstance(ctx.exception.__cause__, UnicodeDecodeError)

	def test_closed_stream_is_read_error(self):
		stream = io.StringIO(json.dumps(self.good))
		stream.close()
		sc = RobustScaler()
		with self.assertRaises(DataFormatError):
			sc.load_external_parameters(stream)
		self.assertFalse(sc.is_fitted())

	def test_utf8_bom_is_accepted(self):
		payload = b"\xef\xbb\xbf" + json.dumps(self.good).encode("utf-8")
		from_bytes = RobustScaler.from_json(io.BytesIO(payload))
		np.testing.assert_array_equal(from_bytes.center_, [3.0, 4.0])
		p = self.root / "bom.json"
		p.write_bytes(payload)
		from_path = RobustScaler.from_json(p)
		np.testing.assert_array_equal(from_path.scale_, [2.0, 2.0])
		from_text = RobustScaler.from_json(io.TextIOWrapper(io.BytesIO(payload), encoding="utf-8"))
		self.assertEqual(from_text.n_features(), 2)

	def test_non_vector_arrays_rejected(self):
		for raw in (np.float64(1.0), np.array(1.0), np.ones((1, 1))):
			with self.subTest(raw=raw):
				with self.assertRaises(ParameterValidationError):
					SklearnScalerParams.from_mapping(_record(raw, [1.0], 1))

	def test_numpy_vectors_accepted(self):
		params = SklearnScalerParams.from_mapping(_record(np.array([1.0, 2.0]), np.array([0.5, 0.5]), 2))
		np.testing.assert_array_equal(params.center, [1.0, 2.0])

	def test_unsupported_source(self):
		with self.assertRaises(ParameterReadError):
			SklearnScalerParams.read(12345)

	def test_error_categories_are_distinct(self):
		self.assertFalse(issubclass(ContractViolation, DataFormatError))
		self.assertTrue(issubclass(ParameterValidationError, ValueError))
		self.assertFalse(issubclass(ParameterReadError, ParameterValidationError))


class TestExportParameters(unittest.TestCase):
	def test_export_then_load_reproduces_transform(self):
		rng = np.random.default_rng(5)
		X = rng.gamma(2.0, size=(30, 3))
		local = RobustScaler().fit(X)
		params = local.to_params()
		self.assertEqual(params.n_features_in, 3)
		loaded = RobustScaler.from_json(io.StringIO(params.to_json()))
		np.testing.assert_array_equal(loaded.transform(X), local.transform(X))

	def test_write_and_read(self):
		params = SklearnScalerParams.from_mapping(_record([1.5, -2.0], [0.5, 4.0], 2))
		with tempfile.TemporaryDirectory() as d:
			p = Path(d) / "nested" / "scaler.json"
			params.write(p)
			back = SklearnScalerParams.read(p)
			self.assertEqual(json.loads(p.read_text(encoding="utf-8")), params.to_dict())
		np.testing.assert_array_equal(back.center, params.center)
		np.testing.assert_array_equal(back.scale, params.scale)

	def test_to_json_is_stable(self):
		params = SklearnScalerParams.from_mapping(_record([1.0], [2.0], 1))
		self.assertEqual(params.to_json(), '{"center_":[1.0],"n_features_in_":1,"scale_":[2.0]}')

	def test_export_unfit(self):
		with self.assertRaises(ContractViolation):
			RobustScaler().to_params()


if __name__ == "__main__":
	unittest.main()
