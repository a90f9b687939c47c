from __future__ import annotations

import pandas as pd
import pytest

from almondcast.core.pipeline import PipelineConfig, run_pipeline
from almondcast.errors import UnknownYearError
from almondcast.scenarios import load_strata, strata_from_groups

import run_almondcast

from conftest import make_climate


def test_run_pipeline_in_memory(climate):
    cfg = PipelineConfig(n_samples=12, seed=3)
    res = run_pipeline(climate, cfg)
    assert len(res.simulations) == 12 * 5
    assert len(res.yearly) == 5
    assert len(res.parameters) == 12
    assert list(res.quantiles.columns) == ["year", "q05", "q50", "q95"]
    assert res.strata is None


def test_run_pipeline_with_strata(climate):
    strata = strata_from_groups({"high": [2000, 2001], "low": [2002, 2003, 2004]})
    res = run_pipeline(climate, PipelineConfig(n_samples=4), bucket_assignment=strata)
    assert set(res.strata["stratum"]) == {"high", "low"}
    assert len(res.strata) == 5


def test_run_pipeline_strict_strata(climate):
    with pytest.raises(UnknownYearError):
        run_pipeline(climate, PipelineConfig(n_samples=2), bucket_assignment={2000: "high"})
    res = run_pipeline(climate, PipelineConfig(n_samples=2, strict_strata=False), bucket_assignment={2000: "high"})
    assert res.strata["year"].tolist() == [2000]


def test_run_pipeline_from_path(tmp_path, climate):
    fp = tmp_path / "clim.csv"
    climate.to_csv(fp, index=False)
    a = run_pipeline(fp, PipelineConfig(n_samples=3))
    b = run_pipeline(climate, PipelineConfig(n_samples=3))
    pd.testing.assert_frame_equal(a.simulations, b.simulations)


def test_strata_from_groups_conflict():
    with pytest.raises(ValueError):
        strata_from_groups({"high": [2000], "low": [2000]})


def test_load_strata(tmp_path):
    fp = tmp_path / "strata.csv"
    fp.write_text("Year,Label\n2000,high\n2001, low\n", encoding="utf-8")
    assert load_strata(fp) == {2000: "high", 2001: "low"}


def test_cli_end_to_end(tmp_path, capsys):
    clim = tmp_path / "clim.csv"
    make_climate(years=range(2000, 2004)).to_csv(clim, index=False)
    strata = tmp_path / "strata.csv"
    strata.write_text("year,label\n2000,high\n2001,mid\n2002,low\n2003,low\n", encoding="utf-8")

    rc = run_almondcast.main(["--input", str(clim), "--n-samples", "5", "--strata", str(strata), "--seed", "1"])
    out = capsys.readouterr().out
    assert rc == 0
    assert "Simulation rows: 20" in out
    assert "Profit by stratum" in out


def test_cli_reports_core_errors(tmp_path, capsys):
    clim = tmp_path / "clim.csv"
    make_climate(years=[2000], months=[1]).to_csv(clim, index=False)
    rc = run_almondcast.main(["--input", str(clim), "--n-samples", "2"])
    assert rc == 1
    assert "No year has data" in capsys.readouterr().err
