"""
订单基础设施层。
"""
