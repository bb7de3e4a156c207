"""HTML templates for checkout mail.

Client-supplied values are escaped before interpolation; prices are shown as submitted.
"""

from __future__ import annotations

from html import escape
from typing import Any

from services.api.app.services.checkout_base import VendorGroup
from services.api.app.services.mail_base import MailMessage


def _money(value: Any) -> str:
    if value is None:
        return "-"
    try:
        return f"${float(value):.2f}"
    except (TypeError, ValueError):
        return escape(str(value))


def _line_row(item: dict[str, Any]) -> str:
    return (
        "<tr>"
        f"<td>{escape(str(item.get('productName', '')))}</td>"
        f"<td>{_money(item.get('productPrice'))}</td>"
        f"<td>{_money(item.get('discountedPrice'))}</td>"
        f"<td>{escape(str(item.get('quantity', '')))}</td>"
        "</tr>"
    )


class CustomerConfirmationTemplate:
    subject = "Order Confirmation - Your Order has been placed"

    @classmethod
    def render(
        cls,
        *,
        order_id: str,
        total_cost: float,
        client_details: dict[str, Any],
        cart_items: list[dict[str, Any]],
    ) -> MailMessage:
        name = escape(str(client_details.get("name", "")))
        rows = "".join(_line_row(item) for item in cart_items)

        html_body = (
            f"<h2>Thank you for your order, {name}!</h2>"
            f"<p>Your order ID: <strong>{escape(order_id)}</strong></p>"
            f"<p>Total Amount: <strong>{_money(total_cost)}</strong></p>"
            "<h3>Order Details:</h3>"
            '<table border="1" cellspacing="0" cellpadding="10">'
            "<thead><tr>"
            "<th>Product Name</th><th>Original Price</th>"
            "<th>Discounted Price</th><th>Quantity</th>"
            "</tr></thead>"
            f"<tbody>{rows}</tbody>"
            "</table>"
            "<p>We will notify you when your order is shipped.</p>"
        )

        text_lines = [
            f"Thank you for your order, {client_details.get('name', '')}!",
            f"Order ID: {order_id}",
            f"Total Amount: {_money(total_cost)}",
            "",
        ]
        for item in cart_items:
            text_lines.append(
                f"- {item.get('productName', '')} x{item.get('quantity', '')} "
                f"({_money(item.get('productPrice'))}, "
                f"discounted {_money(item.get('discountedPrice'))})"
            )

        return MailMessage(
            to=str(client_details.get("email", "")),
            subject=cls.subject,
            html_body=html_body,
            text_body="\n".join(text_lines),
        )


class VendorNewOrderTemplate:
    subject = "New Order Received"

    @classmethod
    def render(
        cls,
        *,
        order_id: str,
        group: VendorGroup,
        client_details: dict[str, Any],
    ) -> MailMessage:
        address = ", ".join(
            str(client_details.get(key, "")) for key in ("address", "city", "country")
        )

        html_body = (
            "<h2>New Order Received</h2>"
            f"<p>Order ID: <strong>{escape(order_id)}</strong></p>"
            f"<p>Store: <strong>{escape(group.store_name)}</strong></p>"
            f"<p>Product: <strong>{escape(group.product_name)}</strong></p>"
            f"<p>Customer: <strong>{escape(str(client_details.get('name', '')))}</strong></p>"
            f"<p>Address: {escape(address)}</p>"
            "<p>Please process the order as soon as possible.</p>"
        )
        text_body = (
            f"New order {order_id} for {group.store_name}\n"
            f"Product: {group.product_name}\n"
            f"Customer: {client_details.get('name', '')}\n"
            f"Address: {address}\n"
        )

        return MailMessage(
            to=group.vendor_email,
            subject=cls.subject,
            html_body=html_body,
            text_body=text_body,
        )
