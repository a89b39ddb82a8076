"""
City Designer

Procedural city layout and traffic simulation engine. Turns a small set of
numeric parameters into a road network, parks, a central fountain and
buildings, then keeps a population of cars moving along the roads.

Can be used as:
- CLI tool: python -m city_designer.main
- Library: CityGenerator / TrafficGenerator from an external frame loop
"""

__version__ = "0.3.0"
__author__ = "City Designer Team"
