import pytest
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from testsuites.ui_testing.pages.cart_drawer import CartDrawer
from testsuites.ui_testing.pages.checkout_page import (
    PAYMENT_FIELDS,
    CheckoutData,
    CheckoutError,
    CheckoutPage,
    payment_iframe_selector,
)
from testsuites.unit.fakes import FakeLocator, FakePage


CHECKOUT_BUTTON = "role=button[name=Check out]"
PAY_NOW = "role=button[name=Pay now]"


def test_checkout_data_from_bundled_config(config):
    data = CheckoutData.from_config(config)

    assert data == CheckoutData()
    assert data.cvc == "123"
    assert data.expiry == "12/25"


def test_checkout_data_env_override(config, monkeypatch):
    monkeypatch.setenv("CHECKOUT_EMAIL", "qa@example.com")
    assert CheckoutData.from_config(config).email == "qa@example.com"


def test_payment_iframe_selector():
    assert payment_iframe_selector("Security code") == 'iframe[title="Field container for: Security code"]'


class TestCartDrawer:

    @pytest.mark.asyncio
    async def test_proceeds_to_checkout(self, config):
        button = FakeLocator(visible=True)
        page = FakePage({CHECKOUT_BUTTON: button}, url="https://www.yugustore.com/checkouts/cn/abc")

        await CartDrawer(page, config=config).proceed_to_checkout()

        assert button.clicks == 1
        assert page.waits == [8000, 3000, 5000]

    @pytest.mark.asyncio
    async def test_missing_checkout_button(self, fake_page, config):
        with pytest.raises(CheckoutError, match="Checkout button not visible"):
            await CartDrawer(fake_page, config=config).proceed_to_checkout()

    @pytest.mark.asyncio
    async def test_checkout_page_never_reached(self, fake_page, config):
        fake_page.elements[CHECKOUT_BUTTON] = FakeLocator(visible=True)

        with pytest.raises(CheckoutError, match="Checkout page not reached"):
            await CartDrawer(fake_page, config=config).proceed_to_checkout()


class TestCheckoutPage:

    @pytest.mark.asyncio
    async def test_payment_fields_are_filled_inside_their_iframes(self, fake_page, config):
        fields = {}
        for title, _ in PAYMENT_FIELDS:
            fields[title] = FakeLocator(visible=True)
            fake_page.frames[payment_iframe_selector(title)] = FakePage(
                {f"role=textbox[name={title}]": fields[title]}
            )
        mobile = FakeLocator(visible=True)
        fake_page.elements["role=textbox[name=Mobile phone number]"] = mobile

        await CheckoutPage(fake_page, config=config).fill_payment_details(CheckoutData())

        assert fields["Card number"].filled == ["4111111111111111"]
        assert fields["Expiration date (MM / YY)"].filled == ["12/25"]
        assert fields["Security code"].filled == ["123"]
        assert fields["Name on card"].filled == ["John Doe"]
        assert mobile.filled == ["+44 3001234567"]

    @pytest.mark.asyncio
    async def test_hidden_payment_field_raises(self, fake_page, config):
        with pytest.raises(PlaywrightTimeoutError):
            await CheckoutPage(fake_page, config=config).fill_card_field("Card number", "4111")

    @pytest.mark.asyncio
    async def test_complete_payment_when_already_paid(self, fake_page, config):
        await CheckoutPage(fake_page, config=config).complete_payment()
        assert fake_page.waits == [5000, 8000]

    @pytest.mark.asyncio
    async def test_complete_payment_clicks_visible_pay_now(self, fake_page, config):
        pay_now = FakeLocator(visible=True)
        fake_page.elements[PAY_NOW] = pay_now

        await CheckoutPage(fake_page, config=config).complete_payment()

        assert pay_now.clicks == 1
        assert fake_page.waits == [5000, 3000, 8000]
