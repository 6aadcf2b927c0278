"""C++ source generation helpers, a function wrapper generator, a g++ build driver,
and installers for project templates and a Code::Blocks wizard."""

__version__ = "0.1.0"