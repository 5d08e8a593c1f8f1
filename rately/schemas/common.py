"""Pagination blocks returned alongside list payloads."""

from rately.schemas.base import CamelModel


class Pagination(CamelModel):
    current_page: int
    total_pages: int
    limit: int


class UserPagination(Pagination):
    total_users: int


class StorePagination(Pagination):
    total_stores: int


class RatingPagination(Pagination):
    total_ratings: int
