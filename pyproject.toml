[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "gzrender"
version = "0.1.0"
description = "A small software scanline renderer with Phong shading, texture mapping and supersampled antialiasing"
requires-python = ">=3.10"
dependencies = []
keywords = ["rendering", "rasterizer", "scanline", "phong", "texture", "antialiasing", "ppm"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Education",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Multimedia :: Graphics :: 3D Rendering",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
gzrender = "gzrender.application:main"

[tool.hatch.build.targets.wheel]
packages = ["gzrender"]

[tool.pytest.ini_options]
addopts = "-ra"
