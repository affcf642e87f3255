#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""工具模块：缓存、时区、输入处理、异常、日志"""
