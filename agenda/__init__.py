"""Agenda API - appointment booking with conflict checks"""
