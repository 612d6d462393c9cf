"""
================================================================================
Checkout Page Object (Async / Playwright)
================================================================================

Hosted checkout form: contact, delivery address and card payment.

Card fields live in cross-origin iframes titled
"Field container for: <field>"; each is filled through a frame locator.
Popups are dismissed between the payment fields because the storefront
re-opens marketing overlays while the form is being filled.

================================================================================
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from typing import Any, Dict, Optional

import allure
from loguru import logger

from storefront_tools.common import ConfigLoader
from testsuites.ui_testing.framework.page_base import PageBase


class CheckoutError(Exception):
    """Raised when a checkout step cannot proceed."""
    pass


@dataclass
class CheckoutData:
    """Fixed test data typed into the checkout form."""

    email: str = "test@gmail.com"
    first_name: str = "Test"
    last_name: str = "Engineer"
    address: str = "UK"
    apartment: str = "85 City Road"
    city: str = "London"
    postcode: str = "SW45Ja"
    phone: str = "+44 3001234567"
    card_number: str = "4111111111111111"
    expiry: str = "12/25"
    cvc: str = "123"
    name_on_card: str = "John Doe"

    @classmethod
    def from_config(cls, config: Optional[ConfigLoader] = None) -> "CheckoutData":
        """Defaults overridden by the `checkout` section (and CHECKOUT_* variables)."""
        config = config or ConfigLoader()
        return cls(**{
            f.name: str(config.get(f"checkout.{f.name}", f.default))
            for f in fields(cls)
        })

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


# Iframe field title -> CheckoutData attribute
PAYMENT_FIELDS = (
    ("Card number", "card_number"),
    ("Expiration date (MM / YY)", "expiry"),
    ("Security code", "cvc"),
    ("Name on card", "name_on_card"),
)


def payment_iframe_selector(field_name: str) -> str:
    return f'iframe[title="Field container for: {field_name}"]'


class CheckoutPage(PageBase):
    """Checkout page object (async)."""

    URL_PATH = "/checkout"

    async def _fill_textbox(self, name: str, value: str, click_first: bool = False) -> None:
        field = self.page.get_by_role("textbox", name=name)
        await field.wait_for(state="visible", timeout=self.timeout("element", 60000))
        if click_first:
            await field.click()
        await field.fill(value)
        logger.info(f"✅ {name} filled")

    @allure.step("Fill contact and delivery address")
    async def fill_contact_and_address(self, data: CheckoutData) -> None:
        logger.info("⏳ Waiting for checkout form to be ready...")
        await self.settle("before_form_fill", 3000)
        await self.dismiss_popups()

        await self._fill_textbox("Email", data.email, click_first=True)
        await self.settle("after_email", 2000)

        await self._fill_textbox("First name", data.first_name)
        await self.settle("between_fields", 1000)
        await self._fill_textbox("Last name", data.last_name)
        await self.settle("between_fields", 1000)

        address = self.page.get_by_role("combobox", name="Address")
        await address.wait_for(state="visible", timeout=self.timeout("element", 60000))
        await address.fill(data.address)
        logger.info("✅ Address filled")
        await self.settle("between_fields", 1000)

        await self._fill_textbox("Apartment, suite, etc.", data.apartment)
        await self.settle("between_fields", 1000)
        await self._fill_textbox("City", data.city)
        await self.settle("between_fields", 1000)
        await self._fill_textbox("Postcode", data.postcode)
        await self.settle("between_fields", 1000)

        # Bring the payment section into view
        await self.scroll_by(700)
        await self.settle("after_scroll", 2000)

        phone = self.page.get_by_placeholder("Phone", exact=True)
        await phone.wait_for(state="visible", timeout=self.timeout("element", 60000))
        await phone.click()
        await phone.fill(data.phone)
        logger.info("✅ Phone filled")
        await self.settle("after_payment_field", 2000)

    async def fill_card_field(
        self,
        field_name: str,
        value: str,
        attach_timeout: Optional[int] = None,
    ) -> None:
        """
        Fill one card field inside its payment iframe.

        Args:
            field_name: Accessible name shared by the iframe title and its textbox
            value: Text to type
            attach_timeout: How long to wait for the iframe to be attached
        """
        selector = payment_iframe_selector(field_name)
        await self.wait_for_element(
            selector,
            state="attached",
            timeout=attach_timeout or self.timeout("payment_iframe", 60000),
        )
        field = self.page.frame_locator(selector).get_by_role("textbox", name=field_name)
        await field.wait_for(state="visible", timeout=self.timeout("payment_iframe", 60000))
        await field.fill(value)
        logger.info(f"✅ {field_name} filled")
        await self.settle("after_payment_field", 2000)

    @allure.step("Fill payment details")
    async def fill_payment_details(self, data: CheckoutData) -> None:
        logger.info("⏳ Waiting for payment iframes...")
        await self.settle("payment_iframes", 5000)
        await self.dismiss_popups()

        for field_name, attribute in PAYMENT_FIELDS:
            attach_timeout = None
            if field_name == "Name on card":
                attach_timeout = self.timeout("name_on_card_iframe", 90000)
            await self.fill_card_field(field_name, getattr(data, attribute), attach_timeout)
            await self.dismiss_popups()

        mobile = self.page.get_by_role("textbox", name="Mobile phone number")
        await mobile.click()
        await mobile.fill(data.phone)
        logger.info("✅ Mobile number filled")
        await self.settle("after_payment_field", 2000)

        await self.dismiss_popups()

    @property
    def pay_now_button(self):
        return self.page.get_by_role("button", name="Pay now")

    @allure.step("Click Pay now")
    async def pay_now(self, confirmation_timeout: Optional[int] = None) -> None:
        button = self.pay_now_button
        await button.wait_for(state="visible", timeout=self.timeout("pay_now", 60000))
        await button.click()
        logger.info("✅ Pay Now clicked")
        await self.wait_for_page_load(timeout=confirmation_timeout or self.timeout("pay_now", 60000))

    @allure.step("Fill checkout form")
    async def fill_checkout_form(self, data: Optional[CheckoutData] = None) -> None:
        """Contact, address and payment, then Pay now."""
        data = data or CheckoutData.from_config(self.config)
        await self.fill_contact_and_address(data)
        await self.fill_payment_details(data)
        await self.settle("before_pay_now", 3000)
        await self.pay_now()

    @allure.step("Complete payment")
    async def complete_payment(self) -> None:
        """
        Wait out payment processing.

        `fill_checkout_form` already clicked Pay now; the button is clicked
        again only when the storefront still shows it.
        """
        logger.info("⏳ Waiting for payment section...")
        await self.settle("payment_section", 5000)

        if await self.pay_now_button.first.is_visible():
            await self.settle("before_pay_now", 3000)
            await self.pay_now(confirmation_timeout=self.timeout("payment_confirmation", 90000))
        else:
            logger.info("ℹ️ Pay now already submitted")

        await self.settle("post_payment", 8000)


__all__ = [
    "CheckoutPage",
    "CheckoutData",
    "CheckoutError",
    "PAYMENT_FIELDS",
    "payment_iframe_selector",
]
