"""
Unit tests for the Razorpay gateway wrapper.
"""
from unittest.mock import MagicMock

import pytest
from razorpay.errors import BadRequestError, ServerError

from farmform.services.gateway import PaymentGatewayError, RazorpayGateway


@pytest.fixture
def sdk_client() -> MagicMock:
    client = MagicMock()
    client.order.create.return_value = {
        "id": "order_Rf6Cbf0fMUaEkg",
        "entity": "order",
        "amount": 30000,
        "currency": "INR",
        "receipt": "reg_abc",
        "status": "created",
    }
    return client


class TestRazorpayGateway:
    @pytest.mark.unit
    def test_create_order_payload(self, sdk_client: MagicMock) -> None:
        gateway = RazorpayGateway("rzp_test_key", "secret", client=sdk_client)

        order = gateway.create_order(
            amount=30000,
            currency="INR",
            receipt="reg_abc",
            notes={"farmerName": "Ravi", "contactNumber": ""},
        )

        assert order["id"] == "order_Rf6Cbf0fMUaEkg"
        sdk_client.order.create.assert_called_once_with(
            {
                "amount": 30000,
                "currency": "INR",
                "receipt": "reg_abc",
                "notes": {"farmerName": "Ravi", "contactNumber": ""},
            }
        )

    @pytest.mark.unit
    def test_real_sdk_client_is_built_from_credentials(self) -> None:
        gateway = RazorpayGateway("rzp_test_key", "secret")

        assert gateway.key_id == "rzp_test_key"
        assert gateway._client.auth == ("rzp_test_key", "secret")

    @pytest.mark.unit
    @pytest.mark.parametrize("error", [BadRequestError("receipt length"), ServerError("503")])
    def test_sdk_errors_are_wrapped(self, sdk_client: MagicMock, error: Exception) -> None:
        sdk_client.order.create.side_effect = error
        gateway = RazorpayGateway("rzp_test_key", "secret", client=sdk_client)

        with pytest.raises(PaymentGatewayError) as excinfo:
            gateway.create_order(amount=30000, currency="INR", receipt="reg_abc", notes={})

        assert excinfo.value.__cause__ is error

    @pytest.mark.unit
    @pytest.mark.parametrize("response", [None, {}, {"id": ""}, "order_x"])
    def test_response_without_id(self, sdk_client: MagicMock, response) -> None:
        sdk_client.order.create.return_value = response
        gateway = RazorpayGateway("rzp_test_key", "secret", client=sdk_client)

        with pytest.raises(PaymentGatewayError):
            gateway.create_order(amount=30000, currency="INR", receipt="reg_abc", notes={})
