"""Release lanes for the MapboxMaps iOS SDK and its Examples app.

Each lane is a fixed sequence of fastlane actions driven from Python: code
signing setup, unit tests, Firebase Test Lab dispatch, build number
increments and TestFlight submission.
"""

__version__ = "0.1.0"
