[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "courtclient"
version = "2.10.1"
description = "Client core for courtroom role-playing servers: settings, favourites, networking, emote and evidence logic, and a server-list command"
requires-python = ">=3.10"
dependencies = [
    "websocket-client",
]
keywords = ["courtroom", "role-playing", "game client", "websocket", "evidence", "master server"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Games/Entertainment :: Role-Playing",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
courtclient = "courtclient.lobby:main"

[tool.hatch.build.targets.wheel]
packages = ["courtclient"]

[tool.pytest.ini_options]
addopts = "-ra"
