"""Inventory service client base class."""

import urllib.parse
from logging import Logger
from typing import Any, TypeVar

import requests
from fastapi import status
from fastapi.encoders import jsonable_encoder
from pydantic import AnyHttpUrl, ValidationError
from requests.exceptions import ConnectionError, RequestException, Timeout

from booter.exceptions import NotFoundError, TransportError
from booter.models.core import InventoryRecord

RecordT = TypeVar("RecordT", bound=InventoryRecord)


class InventoryClient:
    """Class with the common logic to send requests to an inventory service.

    Each request is sent with basic authentication. A 404 answer raises a
    NotFoundError, any other unexpected status code or connection issue raises a
    TransportError.
    """

    service_name = "inventory"

    def __init__(
        self,
        *,
        url: AnyHttpUrl,
        username: str,
        password: str,
        logger: Logger,
        timeout: int = 10,
    ) -> None:
        self.base_url = str(url).rstrip("/") + "/"
        self.auth = (username, password)
        self.logger = logger
        self.timeout = timeout

    def build_url(self, path: str) -> str:
        """Join the service base URL with the given path."""
        return urllib.parse.urljoin(self.base_url, path.lstrip("/"))

    def request(
        self,
        method: str,
        path: str,
        *,
        expected: tuple[int, ...] = (status.HTTP_200_OK,),
        params: dict[str, Any] | None = None,
        data: dict[str, Any] | None = None,
    ) -> Any:
        """Send a request and return the decoded JSON body.

        Args:
            method (str): HTTP method.
            path (str): path relative to the service base URL.
            expected (tuple of int): status codes considered a success.
            params (dict | None): query string parameters.
            data (dict | None): JSON body.

        Returns:
            Any: the decoded body. None when the body is empty.

        Raises:
            NotFoundError when the service answers 404.
            TransportError on connection errors, timeouts and unexpected status codes.

        """
        url = self.build_url(path)
        self.logger.debug("%s %s", method.upper(), url)
        if params:
            self.logger.debug("Params=%s", params)
        if data is not None:
            self.logger.debug("Data=%s", data)

        try:
            resp = requests.request(
                method,
                url=url,
                params=params,
                json=None if data is None else jsonable_encoder(data),
                auth=self.auth,
                headers={"accept": "application/json"},
                timeout=self.timeout,
            )
        except (ConnectionError, Timeout) as e:
            msg = f"Can't connect to {self.service_name} at {url}: {e!s}"
            self.logger.error(msg)
            raise TransportError(msg, url=url) from e
        except RequestException as e:
            msg = f"Request to {self.service_name} at {url} failed: {e!s}"
            self.logger.error(msg)
            raise TransportError(msg, url=url) from e

        if resp.status_code in expected:
            if not resp.content:
                return None
            try:
                body = resp.json()
            except ValueError as e:
                msg = f"{self.service_name} at {url} returned a non JSON body"
                self.logger.error(msg)
                raise TransportError(
                    msg, url=url, status_code=resp.status_code
                ) from e
            self.logger.debug(body)
            return body

        self.logger.debug("Status code: %s", resp.status_code)
        self.logger.debug("Message: %s", resp.text)
        if resp.status_code == status.HTTP_404_NOT_FOUND:
            msg = f"{url} not found in {self.service_name}"
            raise NotFoundError(msg, url=url, status_code=resp.status_code)
        msg = f"{method.upper()} {url} on {self.service_name} returned "
        msg += f"{resp.status_code}"
        raise TransportError(msg, url=url, status_code=resp.status_code)

    def to_record(self, model: type[RecordT], body: Any, path: str) -> RecordT:
        """Build a record from a response body.

        Raises:
            TransportError when the body is not an object or does not match the
                record schema.

        """
        url = self.build_url(path)
        if not isinstance(body, dict):
            msg = f"{self.service_name} at {url} returned no {model.__name__} "
            msg += f"object: {body!r}"
            self.logger.error(msg)
            raise TransportError(msg, url=url)
        try:
            return model(**body)
        except ValidationError as e:
            msg = f"{self.service_name} at {url} returned an invalid "
            msg += f"{model.__name__}: {e!s}"
            self.logger.error(msg)
            raise TransportError(msg, url=url) from e

    def to_records(self, model: type[RecordT], body: Any, path: str) -> list[RecordT]:
        """Build a list of records from a response body. An empty body is []."""
        if body is None:
            return []
        if not isinstance(body, list):
            url = self.build_url(path)
            msg = f"{self.service_name} at {url} returned no {model.__name__} list"
            self.logger.error(msg)
            raise TransportError(msg, url=url)
        return [self.to_record(model, i, path) for i in body]
