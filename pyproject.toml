[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "rmcontrol"
version = "0.1.0"
description = "Control building blocks for robot firmware: PID loops, motor CAN frames, remote-receiver decoding, LED and buzzer helpers, RTT-style printf, a thread pool and rigid transforms."
requires-python = ">=3.10"
dependencies = [
    "numpy",
]
keywords = ["pid", "can", "motor", "gm6020", "dm4310", "dr16", "ws2812", "robotics", "transform"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Software Development :: Embedded Systems",
    "Topic :: Scientific/Engineering",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["rmcontrol"]

[tool.pytest.ini_options]
addopts = "-ra"
