import matplotlib
matplotlib.use("Agg")

import matplotlib.pyplot as plt
import pytest

import generate_graphs
from generate_graphs import demo_scripts, owner_color, plot_memory_map, plot_statistics, run_scripts
from simulator import PageTableSimulator


@pytest.fixture(autouse=True)
def close_figures():
    yield
    plt.close("all")


def test_owner_colors():
    assert owner_color("free") == (1.0, 1.0, 1.0)
    assert owner_color("reserved") == (0.3, 0.3, 0.3)
    data = owner_color("proc:2")
    table = owner_color("pt:2")
    assert table == pytest.approx(tuple(c * 0.6 for c in data))


def test_plot_memory_map(tmp_path):
    simulator = PageTableSimulator()
    simulator.run_commands(["np", "1", "3", "np", "2", "2"])
    fig = plot_memory_map(simulator)
    ax = fig.axes[0]
    assert ax.get_title() == "Physical Memory Map"
    assert len(ax.texts) == 64
    assert ax.texts[1].get_text() == "01\nPT"
    fig.savefig(tmp_path / "map.png")
    assert (tmp_path / "map.png").exists()


def test_run_scripts_and_plot_statistics(capsys):
    simulators, results = run_scripts(demo_scripts)
    assert results["fill"].oom_events == 1
    assert results["fill"].pages_allocated == 63
    assert results["churn"].pages_freed > 0
    assert results["store"].stores == 2

    fig = plot_statistics(results)
    assert len(fig.axes) == 3
    assert [t.get_text() for t in fig.axes[0].get_xticklabels()] == list(demo_scripts)
    assert "OOM: proc 3 data page" in capsys.readouterr().out


def test_main_saves_graphs(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(plt, "show", lambda: None)
    script = tmp_path / "commands.txt"
    script.write_text("np 1 4\nnp 2 2\nkp 1\n")
    generate_graphs.main([str(script)])
    assert (tmp_path / "memory_map.png").exists()
    assert (tmp_path / "allocation_statistics.png").exists()
