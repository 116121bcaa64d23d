"""Slide Studio upload server"""
