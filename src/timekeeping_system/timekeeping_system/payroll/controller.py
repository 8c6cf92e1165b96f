from __future__ import annotations

from flask import Flask, request

from ..common.validators import require_positive_int
from ..common.web import admin_required, client_ip, current_user_id, json_body, login_required, ok, query_int
from ..container import Container
from .service import SalaryInput, TransactionInput


def _salary_input(data: dict) -> SalaryInput:
    return SalaryInput(
        amount=data.get("amount"),
        effective_date=data.get("effective_date") or "",
        notes=data.get("notes"),
    )


def _transaction_input(data: dict) -> TransactionInput:
    return TransactionInput(
        type=data.get("type"),
        amount=data.get("amount"),
        transaction_date=data.get("transaction_date") or "",
        description=data.get("description") or "",
    )


def register(app: Flask, container: Container) -> None:
    salaries = container.salary_service
    transactions = container.transaction_service

    @app.route("/api/salaries/me", methods=["GET"], endpoint="my_salary")
    @login_required
    def my_salary():
        user_id = current_user_id()
        return ok(salaries.get_current_salary(user_id), history=salaries.get_salary_history(user_id))

    @app.route("/api/admin/salaries/<int:user_id>", methods=["GET"], endpoint="user_salaries")
    @admin_required
    def user_salaries(user_id: int):
        return ok(salaries.get_current_salary(user_id), history=salaries.get_salary_history(user_id))

    @app.route("/api/admin/salaries", methods=["POST"], endpoint="create_salary")
    @admin_required
    def create_salary():
        data = json_body()
        created = salaries.create_salary(
            user_id=require_positive_int(data.get("user_id"), "Funcionário"),
            data=_salary_input(data),
            actor_id=current_user_id(),
            ip_address=client_ip(),
        )
        return ok(created, 201)

    @app.route("/api/admin/salaries/<int:salary_id>", methods=["PUT"], endpoint="update_salary")
    @admin_required
    def update_salary(salary_id: int):
        updated = salaries.update_salary(
            salary_id=salary_id, data=_salary_input(json_body()), actor_id=current_user_id(), ip_address=client_ip()
        )
        return ok(updated)

    @app.route("/api/admin/salaries/<int:salary_id>", methods=["DELETE"], endpoint="delete_salary")
    @admin_required
    def delete_salary(salary_id: int):
        salaries.delete_salary(salary_id=salary_id, actor_id=current_user_id(), ip_address=client_ip())
        return ok(message="Salário excluído")

    @app.route("/api/transactions/me", methods=["GET"], endpoint="my_transactions")
    @login_required
    def my_transactions():
        args = request.args
        return ok(
            transactions.list_transactions(
                user_id=current_user_id(),
                type=args.get("type") or None,
                start_date=args.get("start") or None,
                end_date=args.get("end") or None,
            )
        )

    @app.route("/api/admin/transactions", methods=["GET"], endpoint="list_transactions")
    @admin_required
    def list_transactions():
        args = request.args
        return ok(
            transactions.list_transactions(
                user_id=query_int("user_id"),
                type=args.get("type") or None,
                start_date=args.get("start") or None,
                end_date=args.get("end") or None,
            )
        )

    @app.route("/api/admin/transactions", methods=["POST"], endpoint="create_transaction")
    @admin_required
    def create_transaction():
        data = json_body()
        created = transactions.create_transaction(
            user_id=require_positive_int(data.get("user_id"), "Funcionário"),
            data=_transaction_input(data),
            actor_id=current_user_id(),
            ip_address=client_ip(),
        )
        return ok(created, 201)

    @app.route("/api/admin/transactions/<int:transaction_id>", methods=["PUT"], endpoint="update_transaction")
    @admin_required
    def update_transaction(transaction_id: int):
        updated = transactions.update_transaction(
            transaction_id=transaction_id,
            data=_transaction_input(json_body()),
            actor_id=current_user_id(),
            ip_address=client_ip(),
        )
        return ok(updated)

    @app.route("/api/admin/transactions/<int:transaction_id>", methods=["DELETE"], endpoint="delete_transaction")
    @admin_required
    def delete_transaction(transaction_id: int):
        transactions.delete_transaction(transaction_id=transaction_id, actor_id=current_user_id(), ip_address=client_ip())
        return ok(message="Transação excluída")
