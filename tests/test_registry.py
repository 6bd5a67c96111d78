import pytest

from restmodel import Model, UnknownModelError
from restmodel.registry import nearby_class


class Invoice(Model):
    pass


class Billing:

    class Invoice(Model):
        pass

    class Customer(Model):
        pass


def test_class_is_passed_through():
    assert nearby_class(Invoice) is Invoice


def test_dotted_path():
    assert nearby_class(f'{Invoice.__module__}.Invoice') is Invoice
    assert nearby_class(f'{Invoice.__module__}.Billing.Invoice') is Billing.Invoice


def test_same_namespace_first():
    assert nearby_class('Invoice', Billing.Customer) is Billing.Invoice
    assert nearby_class('Invoice', Invoice) is Invoice


def test_enclosing_namespace():
    assert nearby_class('Billing.Customer', Invoice) is Billing.Customer


def test_unknown():
    with pytest.raises(UnknownModelError) as exc:
        nearby_class('Refund', Invoice)
    assert exc.value.name == 'Refund'
