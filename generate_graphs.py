import sys

import matplotlib
import matplotlib.pyplot as plt
from simulator import PageTableSimulator
from memory_manager import PAGE_COUNT

ROW_WIDTH = 16

demo_scripts = {
    'fill': ['np', '1', '20', 'np', '2', '20', 'np', '3', '30'],
    'churn': ['np', '1', '8', 'np', '2', '8', 'kp', '1', 'np', '3', '4',
              'np', '4', '12', 'kp', '2', 'np', '5', '6'],
    'store': ['np', '1', '2', 'sb', '1', '10', '42', 'sb', '1', '300', '7',
              'lb', '1', '10', 'lb', '1', '300'],
}


def owner_color(owner):
    if owner == 'free':
        return (1.0, 1.0, 1.0)
    if owner == 'reserved':
        return (0.3, 0.3, 0.3)
    if owner == 'used':
        # Allocated but not reachable from any live process
        return (0.85, 0.1, 0.1)
    kind, proc_num = owner.split(':')
    r, g, b, _ = matplotlib.colormaps['tab10'](int(proc_num) % 10)
    if kind == 'pt':
        return (r * 0.6, g * 0.6, b * 0.6)
    return (r, g, b)


def plot_memory_map(simulator, title='Physical Memory Map'):
    owners = simulator.page_owners()
    rows = PAGE_COUNT // ROW_WIDTH
    grid = [[owner_color(owners[row * ROW_WIDTH + col]) for col in range(ROW_WIDTH)]
            for row in range(rows)]

    fig, ax = plt.subplots(figsize=(12, 4))
    ax.imshow(grid, aspect='equal')
    for page, owner in enumerate(owners):
        row, col = divmod(page, ROW_WIDTH)
        label = f'{page:02x}'
        if owner.startswith('pt:'):
            label += '\nPT'
        ax.text(col, row, label, ha='center', va='center', fontsize=7)

    ax.set_xticks([])
    ax.set_yticks([])
    ax.set_title(title, fontsize=12, fontweight='bold')
    return fig


def plot_statistics(results):
    metrics = ['pages_allocated', 'pages_freed', 'oom_events']
    titles = ['Pages Allocated', 'Pages Freed', 'OOM Events']
    names = list(results)

    fig, axes = plt.subplots(1, 3, figsize=(15, 5))
    fig.suptitle('Allocation Statistics', fontsize=14, fontweight='bold')

    for ax, metric, title in zip(axes, metrics, titles):
        values = [getattr(results[name], metric) for name in names]
        bars = ax.bar(range(len(names)), values)
        for bar in bars:
            height = bar.get_height()
            ax.text(bar.get_x() + bar.get_width()/2., height,
                    f'{int(height)}', ha='center', va='bottom', fontsize=9)
        ax.set_title(title)
        ax.set_xticks(range(len(names)))
        ax.set_xticklabels(names)
        ax.grid(axis='y', alpha=0.3)

    plt.tight_layout()
    return fig


def run_scripts(scripts):
    results = {}
    simulators = {}
    for name, tokens in scripts.items():
        simulator = PageTableSimulator()
        simulator.run_commands(tokens)
        results[name] = simulator.stats
        simulators[name] = simulator
    return simulators, results


def main(argv=None):
    argv = sys.argv[1:] if argv is None else argv
    if argv:
        simulators = {}
        for filename in argv:
            simulator = PageTableSimulator()
            simulator.run_simulation(filename)
            simulators[filename] = simulator
        results = {name: sim.stats for name, sim in simulators.items()}
    else:
        print("Running demo scripts...")
        simulators, results = run_scripts(demo_scripts)

    for name, simulator in simulators.items():
        print(f"\n{name}:")
        print(simulator.stats)

    last_name = list(simulators)[-1]
    fig = plot_memory_map(simulators[last_name], title=f'Physical Memory Map ({last_name})')
    fig.savefig('memory_map.png', dpi=300, bbox_inches='tight')
    fig = plot_statistics(results)
    fig.savefig('allocation_statistics.png', dpi=300, bbox_inches='tight')
    print("\nGraphs saved as 'memory_map.png' and 'allocation_statistics.png'")
    plt.show()


if __name__ == '__main__':
    main()
