"""Identidad: usuarios, passwords, tokens y control de acceso."""
