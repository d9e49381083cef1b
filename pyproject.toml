[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "bddbench"
version = "0.1.0"
description = "Binary decision diagram benchmarks (apply, CNF compilation, Game of Life Garden-of-Eden search) on a pure-Python BDD manager"
requires-python = ">=3.10"
dependencies = []
keywords = ["bdd", "binary decision diagram", "benchmark", "cnf", "dimacs", "game of life"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Mathematics",
    "Topic :: System :: Benchmark",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
bddbench-apply = "bddbench.apply:main"
bddbench-cnf = "bddbench.cnf:main"
bddbench-game-of-life = "bddbench.gameoflife:main"

[tool.hatch.build.targets.wheel]
packages = ["bddbench"]

[tool.pytest.ini_options]
addopts = "-ra"
