"""Composable class families shared by several test modules.

The classes live in their own registries; tests must not redeclare them.
"""

from classwire.composable import Composable
from classwire.contained import Contained
from classwire.params import Param
from classwire.registry import SpecRegistry

family_registry = SpecRegistry()
garage_registry = SpecRegistry()


# region Family
class Slingshot(Composable, registry=family_registry):
    valid_params = {"size": Param(type=int, default=3, descr="Fork width in inches")}


class Ball(Composable, registry=family_registry):
    valid_params = {"color": Param(type=str, default="red")}


class Son(Composable, registry=family_registry):
    valid_params = {"age": Param(type=int, default=9)}
    contained_objects = {"toy": "Slingshot"}


class Doll(Composable, registry=family_registry):
    valid_params = {"hair": Param(type=str, default="brown")}


class Daughter(Composable, registry=family_registry):
    valid_params = {"name": Param(type=str, default="Jane")}
    contained_objects = {"doll": Doll}


class Parent(Composable, registry=family_registry):
    valid_params = {"surname": Param(type=str, descr="Family name")}
    contained_objects = {
        "son": Son,
        "daughter": Contained(target="Daughter", delayed=True, descr="Built on demand"),
    }


# endregion Family


# region Garage
class Engine(Composable, registry=garage_registry):
    valid_params = {
        "horsepower": Param(type=int),
        "fuel": Param(type=str, default="petrol"),
    }


class DieselEngine(Engine):
    valid_params = {"torque": Param(type=int, default=400)}


class Radio(Composable, registry=garage_registry):
    valid_params = {"station": Param(type=str, default="FM")}


class Car(Composable, registry=garage_registry):
    valid_params = {"fuel": Param(type=str, default="petrol")}
    contained_objects = {"engine": "Engine", "radio": Radio}


# endregion Garage
