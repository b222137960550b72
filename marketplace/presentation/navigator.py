from typing import List

from marketplace.models.navigation import View


class Navigator:
    """
    Records page navigations requested by services.

    Stands in for the browser location: services call go() where the page
    would have been redirected, and the HTTP layer turns the last navigation
    into a redirect response.
    """

    def __init__(self, current_view: View = View.INDEX):
        self.current_view = current_view
        self.history: List[View] = []

    def go(self, view: View) -> None:
        self.history.append(view)
        self.current_view = view

    @property
    def redirect_target(self) -> View | None:
        return self.history[-1] if self.history else None
