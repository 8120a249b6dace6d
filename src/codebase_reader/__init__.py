"""
Codebase Reader - Multi-Language Static Analysis

Discovers source files, parses them concurrently with language-specific
parsers, and folds the results into project metrics: complexity,
maintainability, technical debt, documentation, a dependency graph with
cycle and depth analysis, and a letter-graded quality score.
"""

__version__ = "0.3.0"

from .api import analyze, analyze_file
from .config import AnalysisConfig, load_config
from .engine import Engine
from .metrics import EnhancedProjectAnalysis
from .scanning import AnalysisResult, Parser, ParserRegistry, default_registry

__all__ = [
    "analyze",  # Main entry point
    "analyze_file",
    "Engine",  # Direct engine access
    "AnalysisConfig",
    "load_config",
    "Parser",
    "ParserRegistry",
    "default_registry",
    "AnalysisResult",
    "EnhancedProjectAnalysis",
]
