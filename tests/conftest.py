import importlib
import pytest

@pytest.fixture(scope="session")
def logic():
    return importlib.import_module("hex_reconstructor.logic")

@pytest.fixture(scope="session")
def parse():
    return importlib.import_module("hex_reconstructor.parse")

@pytest.fixture(scope="session")
def layout():
    return importlib.import_module("hex_reconstructor.layout")

@pytest.fixture(scope="session")
def definitions():
    return importlib.import_module("hex_reconstructor.definitions")


XDF_SAMPLE = """<?xml version="1.0" encoding="UTF-8"?>
<XDFFORMAT version="1.60">
  <XDFHEADER>
    <deftitle>Test ECU</deftitle>
    <description>Bench definition</description>
  </XDFHEADER>
  <XDFCONSTANT uniqueid="0x100" flags="0x24">
    <title>Idle RPM</title>
    <address>0x10</address>
    <units>rpm</units>
    <MATH equation="X*0.25+500"><VAR id="X"/></MATH>
  </XDFCONSTANT>
  <XDFCONSTANT flags="0x01" address="32">
    <title>Trim</title>
  </XDFCONSTANT>
  <XDFTABLE id="fuel" flags="0x20">
    <title>Fuel map</title>
    <address value="0x40"/>
    <XDFROWS count="2"/>
    <XDFCOLS count="3"/>
    <MATH><VAR id="X" equation="X/2-40"/></MATH>
  </XDFTABLE>
  <XDFTABLE rows="x" cols="4">
    <title>Spark</title>
  </XDFTABLE>
</XDFFORMAT>
"""

JSON_SAMPLE = """{
  "name": "Bench",
  "description": "hand written",
  "scalars": [
    {"id": "boost", "name": "Boost limit", "address": 4, "length": 2,
     "dataType": "uint16", "endian": "big", "factor": 0.01, "offset": 0, "unit": "bar"},
    {"id": "trim", "name": "Trim", "address": 6, "dataType": "int8"}
  ],
  "tables2d": [
    {"id": "map", "name": "Map", "address": 8, "rows": 2, "cols": 2,
     "dataType": "uint8", "factor": 2, "offset": 1}
  ]
}
"""

@pytest.fixture
def xdf_text():
    return XDF_SAMPLE

@pytest.fixture
def json_text():
    return JSON_SAMPLE
