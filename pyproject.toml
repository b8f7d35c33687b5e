[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "taurtp"
version = "0.1.0"
description = "RTP packet reading and writing, H.264 packetization and send/receive reordering buffers"
requires-python = ">=3.10"
dependencies = []
keywords = ["rtp", "h264", "video", "streaming", "packetizer", "jitter-buffer", "retransmission"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Multimedia :: Video",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["taurtp"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]
