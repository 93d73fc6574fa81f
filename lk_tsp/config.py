# Configuration parameters for LK-TSP
# Search parameters follow Korte & Vygen, "Combinatorial Optimization" (p_1 = 5, p_2 = 2)

# Lin-Kernighan search configuration
LK_CONFIG = {
    'backtracking_depth': 5,     # p_1: deepest level that keeps its alternatives on backtrack
    'infeasibility_depth': 2,    # p_2: up to this level non-tour intermediate walks are tolerated
    'candidate_strategy': 'nearest',  # 'all' | 'nearest' | 'alpha'
    'candidate_k': 10,           # Candidate list length for 'nearest' and 'alpha'
    'time_limit': None,          # Seconds; None = run until local optimum
    'max_exchanges': None,       # Stop after this many committed exchanges; None = unlimited
}

# Candidate edge generation
CANDIDATE_CONFIG = {
    'k': 10,
    'strategies': ['all', 'nearest', 'alpha'],
}

# Start tour construction
START_TOUR_CONFIG = {
    'start_vertex': 0,
}

# Logging
LOGGING_CONFIG = {
    'logger_name': 'lk_tsp',
    'level': 'INFO',
    'log_dir': 'logs',
    'file_logging': True,
}

# Visualization Configuration
VIZ_CONFIG = {
    'figure_size': (10, 8),
    'dpi': 150,
    'marker_size': 20,
    'line_width': 1.5,
    'font_size': 12,
    'tour_color': '#0000FF',
    'start_tour_color': '#A0A0A0',
}

# File Paths
PATHS = {
    'results': 'results/',
    'logs': 'logs/',
}
