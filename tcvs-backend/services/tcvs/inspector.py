"""
Form structure inspector for the /api/debug endpoint.

Summarizes the forms, inputs and buttons on the live TCVS page so selector
drift can be spotted without opening a browser by hand.
"""

from typing import Any, Dict

from bs4 import BeautifulSoup


def describe_form_markup(html: str) -> Dict[str, Any]:
    soup = BeautifulSoup(html or "", "html.parser")

    forms = [
        {
            "id": form.get("id", ""),
            "method": (form.get("method") or "get").lower(),
            "action": form.get("action", ""),
            "className": " ".join(form.get("class", [])),
        }
        for form in soup.find_all("form")
    ]

    inputs = [
        {
            "id": element.get("id", ""),
            "name": element.get("name", ""),
            "type": element.get("type", "text"),
            "className": " ".join(element.get("class", [])),
            "placeholder": element.get("placeholder", ""),
        }
        for element in soup.find_all("input")
    ]

    buttons = [
        {
            "id": element.get("id", ""),
            "type": element.get("type", "submit" if element.name == "button" else ""),
            "text": element.get_text(strip=True) if element.name == "button" else element.get("value", ""),
            "className": " ".join(element.get("class", [])),
        }
        for element in soup.select("button, input[type='submit']")
    ]

    return {
        "title": soup.title.get_text(strip=True) if soup.title else "",
        "formsCount": len(forms),
        "forms": forms,
        "inputs": inputs,
        "buttons": buttons,
    }
